import argparse
import json
import logging
import os
import sys
from typing import Iterable

from splitapk import __version__
from splitapk.device import DeviceProfile, detect_device_profile
from splitapk.models import PackageEntry
from splitapk.selector import select_for_device, validate_selection
from splitapk.sources import extract_entries, format_file_size, read_entries


def _print_entries(entries: Iterable[PackageEntry], as_json: bool) -> None:
    entries = list(entries)
    if as_json:
        print(json.dumps([e.as_dict() for e in entries], indent=4, ensure_ascii=False))
        return
    width = max((len(e.name) for e in entries), default=0)
    for e in entries:
        print(f"{e.name:<{width}}  {'[base]' if e.is_base else e.config.label:<20}  {format_file_size(e.size)}")


def main():
    parser = argparse.ArgumentParser(
        prog='splitapk',
        description='Classify the split apks of an archive or a folder and select the ones a device needs',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        'path',
        type=lambda p: p if os.path.exists(p) else parser.error(f'"{p}" does not exist'),
        help='Path to an archive (.apks, .apkm, .xapk, .zip) or a folder of apks'
    )
    parser.add_argument('-j', '--json', help='Print in json format', action='store_true')
    parser.add_argument('--abi', type=str, help='Device primary ABI (e.g. arm64-v8a)')
    parser.add_argument('--dpi', type=str, help='Device screen density (e.g. 420 or xxhdpi)')
    parser.add_argument('--locale', type=str, help='Device locale (e.g. en-US)')
    parser.add_argument(
        '-d', '--device',
        dest='device',
        help='Read the device profile from this adb device (used when --abi, --dpi and --locale are not given)'
    )
    parser.add_argument('--adb', type=str, help='Path to adb executable')
    parser.add_argument('--debug', help='Print debug logs', action='store_true')
    parser.add_argument('-v', '--version', action='version', version=__version__)

    subparsers = parser.add_subparsers(dest='action', help='Action to perform', required=False)
    subparsers.add_parser('list', help='List and classify the apks (default)')
    subparsers.add_parser('select', help='List the apks selected for the device')
    extract_parser = subparsers.add_parser('extract', help='Copy the apks selected for the device')
    extract_parser.add_argument('-o', '--output', type=str, required=True, help='Output directory', dest='output')

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s'
    )

    try:
        entries = read_entries(args.path)
        if not entries:
            print(f'No apk files found in {args.path}')
            sys.exit(1)

        if args.action in (None, 'list'):
            _print_entries(entries, args.json)
            return

        if any((args.abi, args.dpi, args.locale)):
            device = DeviceProfile.from_values(abi=args.abi, dpi=args.dpi, locale=args.locale)
        else:
            device = detect_device_profile(device_id=args.device, adb_path=args.adb)
        selection = select_for_device(entries, device)
        selected = [e for e in entries if e in selection]
        if not validate_selection(selection, entries):
            print('Error: the selection does not contain a base apk')
            sys.exit(1)

        if args.action == 'select':
            if not args.json:
                print(f'Device: abi={device.primary_abi}, density={device.density_qualifier}, '
                      f"locale={device.language}{'_' + device.region if device.region else ''}")
            _print_entries(selected, args.json)
        elif args.action == 'extract':
            paths = extract_entries(args.path, (e.name for e in selected), args.output)
            if args.json:
                print(json.dumps(paths, indent=4))
            else:
                print(f"Extracted {len(paths)} apks to '{args.output}' "
                      f"({format_file_size(sum(e.size for e in selected))})")
    except Exception as e:
        print(f'Error: {e}')
        sys.exit(1)


if __name__ == '__main__':
    main()
