import logging
import re
from collections import abc
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Set, Tuple, Union

from splitapk.canonical import common_affixes, compute_canonical_names, strip_affixes, strip_extension
from splitapk.models import PackageEntry, SplitConfig

logger = logging.getLogger(__name__)

ABI_QUALIFIERS = frozenset({
    'arm64_v8a', 'armeabi_v7a', 'armeabi', 'x86', 'x86_64', 'mips', 'mips64'
})

DENSITY_QUALIFIERS = frozenset({
    'ldpi', 'mdpi', 'tvdpi', 'hdpi', 'xhdpi', 'xxhdpi', 'xxxhdpi', 'nodpi', 'anydpi'
})

LANGUAGE_PATTERN = re.compile(r'^[a-z]{2,3}(_[A-Z]{2})?$')

# alternatives are tried in order at the start of the name
_PREFIX_MARKER = re.compile(r'split_config\.|split_config_|config\.', re.IGNORECASE)
# greedy, so the match ends after the last marker
_INFIX_MARKER = re.compile(r'.*\.config\.', re.IGNORECASE | re.DOTALL)

_BASE_NAME = 'base'
_BASE_FILE_NAME = 'base.apk'

RawEntry = Union[Tuple[str, int], Sequence[Any], Mapping[str, Any], PackageEntry]


def extract_qualifier(canonical_name: str) -> Optional[str]:
    """
    Extract the config qualifier from a canonical split name.

    Two layouts are recognized:
        - A marker at the start: ``split_config.``, ``split_config_`` or ``config.``
          (``split_config.en`` -> ``en``, ``split_config_arm64_v8a`` -> ``arm64_v8a``).
        - A ``.config.`` marker after a feature name
          (``split_phonesky_webrtc_native_lib.config.x86`` -> ``x86``).

    Markers are matched case-insensitively, the qualifier keeps its case.

    Args:
        canonical_name: The canonical name (see :func:`splitapk.canonical.compute_canonical_names`).
    Returns:
        The qualifier (possibly empty), or ``None`` if no config marker was found.
    """
    match = _PREFIX_MARKER.match(canonical_name) or _INFIX_MARKER.match(canonical_name)
    if match is None:
        return None
    return canonical_name[match.end():]


def classify(qualifier: Optional[str]) -> SplitConfig:
    """
    Classify a config qualifier. Priority: ABI, density, language, none.

    Any bare token of 2 or 3 lowercase letters counts as a locale, so ``classify('foo')`` is a language split.
    Use :func:`classify_name` to classify a whole split name, which requires a config marker first.

    >>> classify('x86_64').type
    SplitType.ABI
    >>> classify('en_US').type
    SplitType.LANGUAGE
    >>> classify('feature') == SplitConfig.NONE
    True
    """
    if not qualifier:
        return SplitConfig.NONE
    lowered = qualifier.lower()
    if lowered in ABI_QUALIFIERS:
        return SplitConfig.abi(qualifier)
    if lowered in DENSITY_QUALIFIERS:
        return SplitConfig.density(qualifier)
    if LANGUAGE_PATTERN.match(qualifier):
        return SplitConfig.language(qualifier)
    return SplitConfig.NONE


def classify_name(canonical_name: str) -> SplitConfig:
    """
    Classify a canonical split name (``split_config.xxhdpi`` -> density).

    Names without a config marker are not classified, even if they look like a qualifier (``foo``, ``en``).
    """
    return classify(extract_qualifier(canonical_name))


def resolve_base(names: Sequence[str], canonical_names: Optional[Sequence[str]] = None) -> Set[str]:
    """
    Get the file names of the base apk.

    A single file is the base only if it is named ``base.apk``. With more files, a file is the base if its
    canonical name is ``base``, so ``base-430-lspatched.apk`` is found next to
    ``split_config.en-430-lspatched.apk``.

    Args:
        names: File names.
        canonical_names: The canonical names of ``names``, if already computed.
    Returns:
        The base file names. Usually zero or one, but every file whose canonical name is ``base`` is returned.
    """
    if len(names) <= 1:
        return {name for name in names if name.lower() == _BASE_FILE_NAME}

    if canonical_names is None:
        stems = [strip_extension(name) for name in names]
        prefix, suffix = common_affixes(stems)
        canonical_names = [strip_affixes(stem, prefix, suffix) for stem in stems]

    return {name for name, canonical in zip(names, canonical_names) if canonical.lower() == _BASE_NAME}


def _unpack(raw: RawEntry) -> Optional[Tuple[str, int]]:
    if isinstance(raw, PackageEntry):
        name, size = raw.name, raw.size
    elif isinstance(raw, abc.Mapping):
        name, size = raw.get('name'), raw.get('size')
    elif isinstance(raw, abc.Sequence) and not isinstance(raw, (str, bytes)):
        name, size = (list(raw[:2]) + [None, None])[:2]
    else:
        name, size = getattr(raw, 'name', None), getattr(raw, 'size', None)

    if not isinstance(name, str) or not name:
        logger.warning('Skipping entry without a file name: %r', raw)
        return None
    try:
        size = int(size or 0)
    except (TypeError, ValueError):
        size = 0
    return name, max(size, 0)


def enrich_entries(raw_entries: Iterable[RawEntry]) -> List[PackageEntry]:
    """
    Detect the base apk and classify every split.

    >>> [(e.name, e.is_base, e.config.type) for e in enrich_entries([('split_config.en.apk', 10), ('base.apk', 20)])]
    [('base.apk', True, SplitType.NONE), ('split_config.en.apk', False, SplitType.LANGUAGE)]

    Args:
        raw_entries: ``(name, size)`` pairs (tuples or lists), ``{'name': ..., 'size': ...}`` mappings, or objects
            with ``name`` and ``size`` attributes. Entries without a name are skipped, a missing or invalid size
            counts as 0.
    Returns:
        The classified entries, base first, then sorted by name.
    """
    pairs = [pair for pair in map(_unpack, raw_entries) if pair is not None]
    names = [name for name, _ in pairs]
    canonical_names = compute_canonical_names(names)
    base_names = resolve_base(names, canonical_names)
    if len(base_names) > 1:
        logger.warning('Found %d base apks: %s', len(base_names), ', '.join(sorted(base_names)))

    entries = []
    for (name, size), canonical in zip(pairs, canonical_names):
        if name in base_names:
            entries.append(PackageEntry(name=name, size=size, is_base=True, config=SplitConfig.NONE))
        else:
            config = classify_name(canonical)
            entries.append(PackageEntry(name=name, size=size, is_base=False, config=config))
        logger.debug('%s -> %s (%s)', name, canonical, entries[-1].config.label)

    return sorted(entries, key=lambda e: (not e.is_base, e.name))
