import logging
import re
import shutil
import subprocess
from typing import NamedTuple, Optional, Tuple, Union

from splitapk.models import Abi

logger = logging.getLogger(__name__)

DEFAULT_ABI = Abi.ARM64.qualifier
DEFAULT_LANGUAGE = 'en'

# Upper bounds (inclusive) of each bucket, midpoints between the standard densities
# (ldpi 120, mdpi 160, tvdpi 213, hdpi 240, xhdpi 320, xxhdpi 480, xxxhdpi 640).
_DPI_BUCKETS = (
    (140, 'ldpi'),
    (186, 'mdpi'),
    (226, 'tvdpi'),
    (280, 'hdpi'),
    (400, 'xhdpi'),
    (560, 'xxhdpi'),
)


def map_dpi_to_qualifier(dpi: int) -> str:
    """
    Get the density bucket qualifier of a screen density.

    >>> map_dpi_to_qualifier(420)
    'xxhdpi'

    Args:
        dpi: The screen density in dots per inch.
    Returns:
        One of ``ldpi``, ``mdpi``, ``tvdpi``, ``hdpi``, ``xhdpi``, ``xxhdpi``, ``xxxhdpi``.
    """
    for upper, qualifier in _DPI_BUCKETS:
        if dpi <= upper:
            return qualifier
    return 'xxxhdpi'


def parse_locale(tag: Optional[str]) -> Tuple[str, Optional[str]]:
    """
    Split a locale tag into language and region.

    >>> parse_locale('en-US')
    ('en', 'US')
    >>> parse_locale('b+sr+Latn')
    ('sr', None)

    Args:
        tag: A locale like ``en-US``, ``pt_BR``, ``fil`` or ``b+sr+Latn``.
    Returns:
        ``(language, region)``, the language lowercase and the region uppercase or ``None``.
    """
    if not tag or not tag.strip():
        return DEFAULT_LANGUAGE, None
    tag = tag.strip()
    if tag.startswith('b+'):
        parts = tag[2:].split('+')
    else:
        parts = re.split(r'[-_]', tag)
    language = parts[0].lower() or DEFAULT_LANGUAGE
    # region is the first 2-letter (or 3-digit) part, scripts and variants are skipped
    region = next((p.upper() for p in parts[1:] if re.fullmatch(r'[A-Za-z]{2}|\d{3}', p)), None)
    return language, region


class DeviceProfile(NamedTuple):
    """
    What the splits are matched against.

    Attributes:
        primary_abi: The device's primary ABI as written in split names (e.g. ``arm64_v8a``).
        density_qualifier: The device's density bucket (e.g. ``xxhdpi``).
        language: The locale language, lowercase (e.g. ``en``).
        region: The locale region (e.g. ``US``), or ``None``.
    """
    primary_abi: str
    density_qualifier: str
    language: str
    region: Optional[str] = None

    @classmethod
    def from_values(
            cls,
            abi: Optional[str] = None,
            dpi: Optional[Union[int, str]] = None,
            locale: Optional[str] = None
    ) -> 'DeviceProfile':
        """
        Build a profile from raw platform values.

        >>> DeviceProfile.from_values(abi='arm64-v8a', dpi=440, locale='es-MX')
        DeviceProfile(primary_abi='arm64_v8a', density_qualifier='xxhdpi', language='es', region='MX')

        Args:
            abi: The primary ABI, either form (``arm64-v8a`` or ``arm64_v8a``). Default: ``arm64_v8a``.
            dpi: The screen density, either in dots per inch (``440``) or as a bucket qualifier (``xxhdpi``).
                Default: ``xxhdpi``.
            locale: The locale tag (e.g. ``en-US``). Default: ``en``.
        """
        if abi:
            known = Abi.from_qualifier(abi)
            primary_abi = known.qualifier if known != Abi.UNKNOWN else abi.strip().replace('-', '_')
        else:
            primary_abi = DEFAULT_ABI

        if dpi is None or dpi == '':
            density = 'xxhdpi'
        elif isinstance(dpi, int) or str(dpi).strip().isdigit():
            density = map_dpi_to_qualifier(int(dpi))
        else:
            density = str(dpi).strip().lower()

        language, region = parse_locale(locale)
        return cls(primary_abi=primary_abi, density_qualifier=density, language=language, region=region)


def _get_program_path(program: str) -> str:
    program_path = shutil.which(program)
    if program_path is None:
        raise FileNotFoundError(f'{program} is not installed or not in the PATH! '
                                'See https://developer.android.com/studio/command-line/adb')
    return program_path


def _shell(adb_args: Tuple[str, ...], *cmd: str) -> str:
    try:
        return subprocess.run(
            (*adb_args, 'shell', *cmd),
            stdout=subprocess.PIPE, stderr=subprocess.PIPE, check=True
        ).stdout.decode('utf-8').strip()
    except subprocess.CalledProcessError as e:
        raise RuntimeError(f"adb command failed ({' '.join(cmd)}):\n"
                           f"{e.stderr.decode('utf-8') or e.stdout.decode('utf-8')}") from e


def detect_device_profile(device_id: Optional[str] = None, adb_path: Optional[str] = None) -> DeviceProfile:
    """
    Read the profile of a connected device using `adb <https://developer.android.com/studio/command-line/adb>`_.

    >>> detect_device_profile()
    >>> detect_device_profile(device_id='emulator-5554', adb_path='/path/to/adb')

    Args:
        device_id: The id of the device (If not specified, adb picks the only connected device).
        adb_path: The path to the adb executable (If not specified, adb will be searched in the ``PATH``).

    Raises:
        FileNotFoundError: If adb is not installed.
        RuntimeError: If the adb command failed (e.g. no device or more than one device connected).
    """
    adb = adb_path or _get_program_path('adb')
    adb_args = (adb, '-s', device_id) if device_id else (adb,)

    abi = _shell(adb_args, 'getprop', 'ro.product.cpu.abi')

    dpi = _shell(adb_args, 'getprop', 'ro.sf.lcd_density')
    if not dpi.isdigit():
        # e.g. "Physical density: 420" (and "Override density: 360" when set)
        densities = re.findall(r'density:\s*(\d+)', _shell(adb_args, 'wm', 'density'))
        dpi = densities[-1] if densities else ''

    locale = _shell(adb_args, 'getprop', 'persist.sys.locale') or _shell(adb_args, 'getprop', 'ro.product.locale')

    profile = DeviceProfile.from_values(abi=abi, dpi=int(dpi) if dpi else None, locale=locale)
    logger.debug('Device %s: abi=%r dpi=%r locale=%r -> %r', device_id or 'default', abi, dpi, locale, profile)
    return profile
