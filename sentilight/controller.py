"""
Mood Controller for SentiLight.

The MoodController class provides a single entry point for:
- Turning mood text into a Tasmota command via Gemini
- Deriving the display color of the command
- Fanning the command out to every registered bulb

Work runs on a background pool. Callbacks are posted to a single UI thread,
so presentation code never sees two callbacks of one request at once:

    on_pre_dispatch(command, color)                      before any bulb I/O
    on_success(command, status, explanation, color)      terminal
    on_failure(message)                                  terminal
"""

import threading
import uuid
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from sentilight.core.config import ControllerConfig
from sentilight.core.registry import DeviceRegistry
from sentilight.devices.tasmota import DispatchReport, TasmotaClient
from sentilight.event_logging import EventLogger
from sentilight.processing.gemini import GeminiClient
from sentilight.processing.parser import parse_response
from sentilight.prompts import get_mood_prompt
from sentilight.utils.color_utils import RGB, FALLBACK_COLOR, hsb_command_to_rgb, rgb_to_hex


STATUS_NO_DEVICES = "ERROR: no Tasmota bulb IPs registered; skipped control request."
STATUS_PRESET_NO_DEVICES = "Tasmota IP address not configured. Register bulbs in the device registry."
PRESET_EXPLANATION = "Preset applied"


def dispatch_status(count: int) -> str:
    return f"OK: sent control command asynchronously to {count} bulb(s)."


@dataclass
class MoodResult:
    """Result of one mood or preset request."""
    success: bool
    command: Optional[str]
    status: str = ""
    explanation: str = ""
    color: RGB = FALLBACK_COLOR
    report: Optional[DispatchReport] = None
    error: Optional[str] = None
    run_id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])

    def __bool__(self) -> bool:
        return self.success

    @property
    def message(self) -> str:
        """Text handed to on_failure."""
        if self.success:
            return self.status
        return f"Command: {self.command or 'N/A'} / Error: {self.error}"

    @property
    def color_hex(self) -> str:
        return rgb_to_hex(self.color)

    @classmethod
    def from_error(cls, error: Exception, command: Optional[str] = None, run_id: str = None) -> 'MoodResult':
        """Create a MoodResult from an exception."""
        return cls(
            success=False,
            command=command,
            error=str(error),
            run_id=run_id or str(uuid.uuid4())[:8],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'command': self.command,
            'status': self.status,
            'explanation': self.explanation,
            'color': list(self.color),
            'color_hex': self.color_hex,
            'dispatch': self.report.to_dict() if self.report else None,
            'error': self.error,
            'run_id': self.run_id,
        }


class MoodController:
    """
    Mood-to-light controller.

    Example usage:
        controller = MoodController(
            ControllerConfig(api_key='...'),
            DeviceRegistry(storage_dir='data/storage'),
        )

        controller.process(
            "tired after a long day",
            on_success=lambda cmd, status, exp, rgb: print(status, exp),
            on_failure=print,
            on_pre_dispatch=lambda cmd, rgb: print(cmd, rgb),
        )
    """

    def __init__(self, config: ControllerConfig, registry: DeviceRegistry,
                 gemini: GeminiClient = None, tasmota: TasmotaClient = None,
                 executor: ThreadPoolExecutor = None, ui_executor: ThreadPoolExecutor = None,
                 event_logger: EventLogger = None):
        """
        Initialize the controller.

        Args:
            config: Initial configuration
            registry: Device registry read on every dispatch
            gemini: Gemini client (created if not given)
            tasmota: Tasmota client (created if not given)
            executor: Background pool for all network work
            ui_executor: Single-thread pool callbacks are posted to
            event_logger: Optional JSONL logger for terminal results
        """
        self._config = config
        self._config_lock = threading.Lock()
        self.registry = registry
        self.gemini = gemini or GeminiClient()
        self.event_logger = event_logger

        self.tasmota = tasmota or TasmotaClient()

        self._owns_executor = executor is None
        self.executor = executor or ThreadPoolExecutor(
            max_workers=config.max_workers, thread_name_prefix='sentilight-io'
        )
        self._owns_ui_executor = ui_executor is None
        self.ui_executor = ui_executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix='sentilight-ui'
        )

        if registry is not None:
            print(f"[controller] Device registry attached. Current IP count: {registry.count()}")

    # ─────────────────────────────────────────────────────────────
    # Configuration
    # ─────────────────────────────────────────────────────────────

    @property
    def config(self) -> ControllerConfig:
        return self._config

    def reconfigure(self, **changes) -> ControllerConfig:
        """
        Swap in a new configuration.

        Requests already running keep the configuration they started with.

        Returns:
            The new configuration
        """
        with self._config_lock:
            self._config = self._config.reconfigure(**changes)
            return self._config

    def device_ips(self, config: ControllerConfig = None):
        """Addresses the next dispatch will target."""
        ips = self.registry.list() if self.registry is not None else ()
        if not ips:
            print("[controller] No Tasmota IPs registered, nothing to control")
        elif (config or self._config).verbose:
            print(f"[controller] Loaded {len(ips)} IP(s) from registry")
        return ips

    # ─────────────────────────────────────────────────────────────
    # Callbacks
    # ─────────────────────────────────────────────────────────────

    def _post(self, callback: Optional[Callable], *args):
        """Run a callback on the UI thread."""
        if callback is None:
            return
        self.ui_executor.submit(self._invoke, callback, args)

    @staticmethod
    def _invoke(callback: Callable, args):
        """
        Call a presentation callback.

        Callback errors are logged, not propagated.
        """
        try:
            callback(*args)
        except Exception as e:
            print(f"[controller] Callback {getattr(callback, '__name__', callback)} raised: {e}")

    def _log(self, kind: str, result: MoodResult, text: str = None):
        if self.event_logger is None:
            return
        try:
            if kind == 'preset':
                self.event_logger.log_preset(result)
            else:
                self.event_logger.log_mood_command(text, result)
        except OSError as e:
            print(f"[controller] Could not write event log: {e}")

    # ─────────────────────────────────────────────────────────────
    # Main entry points
    # ─────────────────────────────────────────────────────────────

    def process(self, mood_text: str, on_success: Callable = None, on_failure: Callable = None,
                on_pre_dispatch: Callable = None) -> Future:
        """
        Turn mood text into a light command and send it to every bulb.

        Args:
            mood_text: Free-text mood description
            on_success: (command, status, explanation, color)
            on_failure: (message)
            on_pre_dispatch: (command, color), called before bulb I/O

        Returns:
            Future resolving to the MoodResult
        """
        config = self._config
        return self.executor.submit(
            self._run_mood, mood_text, config, on_success, on_failure, on_pre_dispatch
        )

    def _run_mood(self, mood_text, config, on_success, on_failure, on_pre_dispatch) -> MoodResult:
        run_id = str(uuid.uuid4())[:8]
        command = None

        try:
            response_text = self.gemini.generate(get_mood_prompt(mood_text), config)

            parsed = parse_response(response_text)
            command = parsed.command
            if config.verbose:
                print(f"[controller] Gemini command: {command}")

            color = hsb_command_to_rgb(command)
        except Exception as e:
            print(f"[controller] Light control error ({run_id}): {e}")
            result = MoodResult.from_error(e, command=command, run_id=run_id)
            self._post(on_failure, result.message)
            self._log('mood', result, mood_text)
            return result

        self._post(on_pre_dispatch, command, color)

        ips = self.device_ips(config)
        if not ips:
            report = DispatchReport([])
            status = STATUS_NO_DEVICES
        else:
            report = self.tasmota.dispatch(command, ips, self.executor, config)
            status = dispatch_status(len(ips))

        result = MoodResult(
            success=True,
            command=command,
            status=status,
            explanation=parsed.explanation,
            color=color,
            report=report,
            run_id=run_id,
        )
        self._post(on_success, command, status, parsed.explanation, color)
        self._log('mood', result, mood_text)
        return result

    def send_preset(self, hsbcolor: str, dimmer: int, ct: int,
                    on_success: Callable = None, on_failure: Callable = None) -> Future:
        """
        Send a fixed HSBCOLOR/Dimmer/CT scene to every bulb.

        Args:
            hsbcolor: 'hue,saturation,brightness'
            dimmer: 0-100
            ct: Color temperature, 153-500
            on_success: (command, status, explanation, color)
            on_failure: (message)

        Returns:
            Future resolving to the MoodResult
        """
        command = f"HSBCOLOR {hsbcolor};Dimmer {dimmer};CT {ct}"
        config = self._config
        return self.executor.submit(self._run_preset, command, config, on_success, on_failure)

    def _run_preset(self, command, config, on_success, on_failure) -> MoodResult:
        color = hsb_command_to_rgb(command)

        ips = self.device_ips(config)
        if not ips:
            result = MoodResult(
                success=False,
                command=command,
                color=color,
                error=STATUS_PRESET_NO_DEVICES,
            )
            self._post(on_failure, STATUS_PRESET_NO_DEVICES)
            self._log('preset', result)
            return result

        report = self.tasmota.dispatch(command, ips, self.executor, config)
        status = dispatch_status(len(ips))
        result = MoodResult(
            success=True,
            command=command,
            status=status,
            explanation=PRESET_EXPLANATION,
            color=color,
            report=report,
        )
        self._post(on_success, command, status, PRESET_EXPLANATION, color)
        self._log('preset', result)
        return result

    def shutdown(self, wait: bool = True):
        """Stop the pools this controller created."""
        if self._owns_executor:
            self.executor.shutdown(wait=wait)
        if self._owns_ui_executor:
            self.ui_executor.shutdown(wait=wait)
