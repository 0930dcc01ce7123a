"""
Device Registry for SentiLight.

Keeps the list of Tasmota bulb IP addresses the controller sends commands
to. The list lives in settings storage as a JSON-encoded array and is
re-read on every call; storage is the source of truth.
"""

import json
import re
from typing import Iterable, List, Optional, Tuple

from .storage import SettingsStore


PREF_NAMESPACE = "tasmota_ips"
KEY_IP_LIST = "ip_list"

DEFAULT_IPS = [
    "192.168.0.50",
    "192.168.0.51",
    "192.168.0.52",
    "192.168.0.53",
    "192.168.0.54",
]

IPV4_PATTERN = re.compile(
    r"^((25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}"
    r"(25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)$"
)

# Retries for add/remove when another writer changes the list mid-update.
MAX_CAS_ATTEMPTS = 64


def is_valid_ipv4(ip: Optional[str]) -> bool:
    """Check a dotted-quad IPv4 address with every octet in 0-255."""
    if not isinstance(ip, str):
        return False
    return IPV4_PATTERN.fullmatch(ip) is not None


class DeviceRegistry:
    """Persisted, deduplicated, insertion-ordered list of bulb addresses."""

    def __init__(self, store: SettingsStore = None, storage_dir: str = None,
                 default_ips: Iterable[str] = None, verbose: bool = False):
        """
        Initialize the registry.

        Args:
            store: Settings store to persist into (created if not given)
            storage_dir: Directory for the default store
            default_ips: Addresses seeded on first-ever initialization
            verbose: Print every mutation
        """
        self.store = store or SettingsStore(PREF_NAMESPACE, storage_dir=storage_dir)
        self.verbose = verbose

        seed = list(DEFAULT_IPS if default_ips is None else default_ips)
        if self.store.compare_and_set(KEY_IP_LIST, None, json.dumps(seed)):
            print(f"[registry] No saved devices, seeded {len(seed)} default IPs")

    # ─────────────────────────────────────────────────────────────
    # Storage helpers
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def _decode(raw: Optional[str]) -> List[str]:
        """Decode the stored JSON list; anything unreadable is empty."""
        if raw is None:
            return []
        try:
            loaded = json.loads(raw)
        except (TypeError, ValueError):
            print("[registry] Stored IP list is corrupt, treating as empty")
            return []
        if not isinstance(loaded, list):
            return []
        return [ip for ip in loaded if isinstance(ip, str)]

    def _save(self, ips: List[str]):
        self.store.put(KEY_IP_LIST, json.dumps(ips))
        if self.verbose:
            print(f"[registry] IP list saved. Total: {len(ips)}")

    def _update(self, mutate) -> bool:
        """
        Read-modify-write the list with compare-and-swap.

        Args:
            mutate: Function taking the current list and returning the new
                    list, or None to leave storage untouched

        Returns:
            True if a new list was stored
        """
        for _ in range(MAX_CAS_ATTEMPTS):
            raw = self.store.get(KEY_IP_LIST)
            updated = mutate(self._decode(raw))
            if updated is None:
                return False
            if self.store.compare_and_set(KEY_IP_LIST, raw, json.dumps(updated)):
                if self.verbose:
                    print(f"[registry] IP list saved. Total: {len(updated)}")
                return True
        raise RuntimeError("IP list kept changing during update, giving up")

    # ─────────────────────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────────────────────

    def list(self) -> Tuple[str, ...]:
        """Get a read-only snapshot of the saved addresses."""
        try:
            return tuple(self._decode(self.store.get(KEY_IP_LIST)))
        except Exception as e:
            print(f"[registry] Error loading IP list: {e}")
            return ()

    def count(self) -> int:
        """Number of saved addresses."""
        return len(self.list())

    def add(self, ip: Optional[str]) -> bool:
        """
        Add an address.

        Returns:
            False if the address is empty, malformed or already saved
        """
        if not isinstance(ip, str):
            return False
        clean_ip = ip.strip()
        if not clean_ip or not is_valid_ipv4(clean_ip):
            return False

        def append(current):
            if clean_ip in current:
                return None
            return current + [clean_ip]

        added = self._update(append)
        if added:
            print(f"[registry] Added {clean_ip}")
        return added

    def remove(self, ip: Optional[str]) -> bool:
        """
        Remove an address.

        Returns:
            False if the address was not saved
        """
        if not isinstance(ip, str):
            return False
        clean_ip = ip.strip()

        def drop(current):
            if clean_ip not in current:
                return None
            current.remove(clean_ip)
            return current

        removed = self._update(drop)
        if removed:
            print(f"[registry] Removed {clean_ip}")
        return removed

    def replace_all(self, ips: Optional[Iterable[str]]) -> None:
        """Overwrite the saved list as given (no validation)."""
        self._save(list(ips) if ips is not None else [])
