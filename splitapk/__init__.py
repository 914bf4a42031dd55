from datetime import datetime

from splitapk.models import Abi, SplitType, SplitConfig, PackageEntry
from splitapk.canonical import compute_canonical_names
from splitapk.classifier import extract_qualifier, classify, classify_name, resolve_base, enrich_entries
from splitapk.device import DeviceProfile, map_dpi_to_qualifier, detect_device_profile
from splitapk.selector import select_for_device, has_base, validate_selection, toggle_entry
from splitapk.sources import read_entries, scan_archive, scan_folder, extract_entries, format_file_size

__all__ = [
    'Abi',
    'SplitType',
    'SplitConfig',
    'PackageEntry',
    'DeviceProfile',
    'compute_canonical_names',
    'extract_qualifier',
    'classify',
    'classify_name',
    'resolve_base',
    'enrich_entries',
    'select_for_device',
    'has_base',
    'validate_selection',
    'toggle_entry',
    'map_dpi_to_qualifier',
    'detect_device_profile',
    'read_entries',
    'scan_archive',
    'scan_folder',
    'extract_entries',
    'format_file_size',
]
__copyright__ = f'Copyright {datetime.now().year} splitapk contributors'
__license__ = 'MIT'
__title__ = 'splitapk'
__version__ = '0.1.0'
