"""
SentiLight command line

Manage registered bulbs and send moods or presets from a terminal.

    python -m apps.cli.main devices list
    python -m apps.cli.main devices add 192.168.0.60
    python -m apps.cli.main mood "stressed, need to calm down"
    python -m apps.cli.main preset --name relax
"""

import sys
from pathlib import Path

# Add parent directories to path for imports
ROOT_DIR = Path(__file__).parent.parent.parent
sys.path.insert(0, str(ROOT_DIR))

# Load .env file from root directory
from dotenv import load_dotenv
load_dotenv(ROOT_DIR / '.env')

from sentilight import MoodController, ControllerConfig, DeviceRegistry, EventLogger, PRESETS, get_preset
from sentilight.core.config import load_config
from sentilight.utils.color_utils import rgb_to_hex


DEFAULT_CONFIG_PATH = ROOT_DIR / 'apps' / 'web' / 'config.yaml'


def load_cli_config(config_path: str = None) -> dict:
    """Load the YAML config, falling back to defaults when it is missing."""
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    try:
        config = load_config(path)
        print(f"Configuration loaded from {path}")
        return config
    except FileNotFoundError:
        print(f"Warning: {path} not found. Using defaults.")
        return {}


def run_devices(registry: DeviceRegistry, args) -> int:
    if args.action == 'list':
        ips = registry.list()
        if not ips:
            print("No bulbs registered.")
        for ip in ips:
            print(ip)
        print(f"Total: {len(ips)}")
        return 0

    if args.action == 'add':
        if not args.ip:
            print("Please enter an IP address.")
            return 2
        if registry.add(args.ip):
            print(f"{args.ip} added")
            return 0
        print("IP address is invalid or already registered.")
        return 1

    if args.action == 'remove':
        if not args.ip:
            print("Please enter an IP address.")
            return 2
        if registry.remove(args.ip):
            print(f"{args.ip} removed")
            return 0
        print("Remove failed: not registered.")
        return 1

    if args.action == 'reset':
        registry.replace_all(args.ips or [])
        print(f"Registry replaced. Total: {registry.count()}")
        return 0

    return 2


def print_pre_dispatch(command, color):
    print(f"  command: {command}")
    print(f"  color:   {rgb_to_hex(color)}")


def print_success(command, status, explanation, color):
    print(f"  status:  {status}")
    print(f"  why:     {explanation}")


def print_failure(message):
    print(f"  FAILED:  {message}")


def wait_and_report(controller: MoodController, future, timeout: float) -> int:
    result = future.result(timeout=timeout)
    if result.report is not None:
        result.report.wait(timeout=timeout)
    # Flushes the UI thread so callback output lands before the summary.
    controller.shutdown(wait=True)

    if result.report is not None and result.report.attempted:
        counts = result.report.to_dict()
        print(f"  bulbs:   {counts['succeeded']} ok, {counts['failed']} failed, {counts['pending']} pending")
    return 0 if result.success else 1


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description='SentiLight CLI')
    parser.add_argument('--config', '-c', help='Path to config file')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose output')
    parser.add_argument('--timeout', type=float, default=60, help='Seconds to wait for a result')
    subparsers = parser.add_subparsers(dest='command', required=True)

    devices = subparsers.add_parser('devices', help='Manage registered bulbs')
    devices.add_argument('action', choices=['list', 'add', 'remove', 'reset'])
    devices.add_argument('ip', nargs='?', help='Bulb IP (add/remove)')
    devices.add_argument('--ips', nargs='*', help='Full IP list (reset)')

    mood = subparsers.add_parser('mood', help='Send a mood description')
    mood.add_argument('text', nargs='+')

    preset = subparsers.add_parser('preset', help='Send a preset scene')
    preset.add_argument('hsbcolor', nargs='?', help="'hue,saturation,brightness'")
    preset.add_argument('--name', choices=sorted(PRESETS), help='Named preset')
    preset.add_argument('--dimmer', type=int, default=100)
    preset.add_argument('--ct', type=int, default=250)

    args = parser.parse_args()

    config = load_cli_config(args.config)
    if args.verbose:
        config.setdefault('controller', {})['verbose'] = True

    controller_config = ControllerConfig.from_dict(config)
    registry = DeviceRegistry(
        storage_dir=config.get('storage', {}).get('dir', 'data/storage'),
        verbose=controller_config.verbose,
    )

    if args.command == 'devices':
        sys.exit(run_devices(registry, args))

    log_config = config.get('logging', {})
    event_logger = None
    if log_config.get('enabled', True):
        event_logger = EventLogger(log_dir=log_config.get('log_dir', 'data/logs'))
    controller = MoodController(controller_config, registry, event_logger=event_logger)

    if args.command == 'mood':
        text = ' '.join(args.text)
        print(f"Mood: {text}")
        future = controller.process(
            text,
            on_success=print_success,
            on_failure=print_failure,
            on_pre_dispatch=print_pre_dispatch,
        )
        sys.exit(wait_and_report(controller, future, args.timeout))

    if args.name:
        values = get_preset(args.name)
        hsbcolor, dimmer, ct = values['hsbcolor'], values['dimmer'], values['ct']
    elif args.hsbcolor:
        hsbcolor, dimmer, ct = args.hsbcolor, args.dimmer, args.ct
    else:
        parser.error('preset needs hsbcolor or --name')

    print(f"Preset: HSBCOLOR {hsbcolor};Dimmer {dimmer};CT {ct}")
    future = controller.send_preset(
        hsbcolor, dimmer, ct,
        on_success=print_success,
        on_failure=print_failure,
    )
    sys.exit(wait_and_report(controller, future, args.timeout))


if __name__ == '__main__':
    main()
