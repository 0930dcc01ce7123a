"""
Tasmota dispatch for SentiLight.

Sends a console command to each bulb with GET /cm?cmnd=<command>. Every
address is an independent unit of work on the shared pool; the caller gets
a DispatchReport back immediately and never waits on the bulbs.
"""

import threading
import time
from concurrent.futures import Executor, Future, wait as wait_futures
from typing import Dict, Iterable, List, Optional
from urllib.parse import quote

import requests

from sentilight.errors import TasmotaError


def encode_command(command: str) -> str:
    """Percent-encode a command for the cmnd query parameter."""
    return quote(command, safe="")


def build_command_url(ip: str, command: str) -> str:
    return f"http://{ip}/cm?cmnd={encode_command(command)}"


class DispatchReport:
    """Outcome counts for one fan-out, filled in as sends finish."""

    def __init__(self, ips: Iterable[str]):
        self.ips: List[str] = list(ips)
        self.succeeded = 0
        self.failed = 0
        self.errors: Dict[str, str] = {}
        self._futures: List[Future] = []
        self._lock = threading.Lock()

    @property
    def attempted(self) -> int:
        return len(self.ips)

    @property
    def pending(self) -> int:
        with self._lock:
            return self.attempted - self.succeeded - self.failed

    def track(self, future: Future):
        self._futures.append(future)

    def record_success(self, ip: str):
        with self._lock:
            self.succeeded += 1

    def record_failure(self, ip: str, error: str):
        with self._lock:
            self.failed += 1
            self.errors[ip] = error

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until every send has finished.

        Returns:
            True if nothing is still pending
        """
        if self._futures:
            wait_futures(self._futures, timeout=timeout)
        return self.pending == 0

    def to_dict(self) -> dict:
        with self._lock:
            return {
                'attempted': self.attempted,
                'succeeded': self.succeeded,
                'failed': self.failed,
                'pending': self.attempted - self.succeeded - self.failed,
                'errors': dict(self.errors),
            }


class TasmotaClient:
    """HTTP client for Tasmota bulbs."""

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = 20.0,
                 attempts: int = 2, retry_delay: float = 0.2, verbose: bool = False,
                 sleep=time.sleep):
        """
        Initialize the client.

        The transport values here are used only when a call is made without
        a config; the controller always passes its request's config.

        Args:
            session: requests session to send through (created if not given)
            timeout: Per-request timeout in seconds
            attempts: Attempts per bulb
            retry_delay: Seconds between attempts
            verbose: Print every successful send
            sleep: Delay function between attempts
        """
        self.session = session or requests.Session()
        self.timeout = timeout
        self.attempts = max(1, attempts)
        self.retry_delay = retry_delay
        self.verbose = verbose
        self._sleep = sleep

    def _settings(self, config=None):
        """(timeout, attempts, retry_delay, verbose) for one call."""
        if config is None:
            return self.timeout, self.attempts, self.retry_delay, self.verbose
        return (config.tasmota_timeout, config.tasmota_attempts,
                config.tasmota_retry_delay, config.verbose)

    def send(self, ip: str, command: str, raise_on_status: bool = True, config=None) -> str:
        """
        Send one command to one bulb.

        Args:
            ip: Bulb address
            command: Raw (unencoded) Tasmota command
            raise_on_status: Treat a non-2xx reply as a failed attempt
            config: ControllerConfig whose tasmota_* values apply to this call

        Returns:
            Response body

        Raises:
            TasmotaError: if every attempt failed
        """
        timeout, attempts, retry_delay, _ = self._settings(config)
        url = build_command_url(ip, command)
        last_error = None

        for attempt in range(1, attempts + 1):
            try:
                response = self.session.get(url, timeout=timeout)
                if raise_on_status and not response.ok:
                    raise TasmotaError(f"Tasmota send failed: HTTP {response.status_code} / URL: {url}")
                return response.text
            except requests.exceptions.RequestException as e:
                last_error = TasmotaError(f"Tasmota request failed: {e}")
            except TasmotaError as e:
                last_error = e

            if attempt < attempts:
                self._sleep(retry_delay)

        raise last_error or TasmotaError("Tasmota call failed (unknown cause)")

    def _send_and_record(self, ip: str, command: str, report: DispatchReport, config=None):
        try:
            body = self.send(ip, command, config=config)
        except TasmotaError as e:
            # Per-bulb failures stay here; other bulbs and the caller are unaffected.
            print(f"[tasmota] IP {ip} control failed: {e}")
            report.record_failure(ip, str(e))
            return
        report.record_success(ip)
        if self._settings(config)[3]:
            print(f"[tasmota] IP {ip} sent (response length: {len(body)})")

    def dispatch(self, command: str, ips: Iterable[str], executor: Executor,
                 config=None) -> DispatchReport:
        """
        Fire a command at every bulb without waiting for replies.

        Args:
            command: Raw Tasmota command
            ips: Bulb addresses
            executor: Pool each send is submitted to
            config: ControllerConfig snapshot every send of this fan-out uses

        Returns:
            DispatchReport that fills in as sends complete
        """
        report = DispatchReport(ips)
        print(f"[tasmota] Sending command to {report.attempted} IP(s) asynchronously")

        for ip in report.ips:
            try:
                report.track(executor.submit(self._send_and_record, ip, command, report, config))
            except RuntimeError as e:
                # Pool already shut down.
                print(f"[tasmota] IP {ip} not sent: {e}")
                report.record_failure(ip, str(e))

        return report
