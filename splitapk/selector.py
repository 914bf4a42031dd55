import logging
from typing import Callable, FrozenSet, Iterable, Optional, Sequence

from splitapk.device import DeviceProfile
from splitapk.models import PackageEntry, SplitType

logger = logging.getLogger(__name__)

_ANY_DENSITY = frozenset({'nodpi', 'anydpi'})
_FALLBACK_LANGUAGE = 'en'


def _language_matcher(entries: Sequence[PackageEntry], device: DeviceProfile) -> Callable[[str], bool]:
    """
    Pick which language qualifier to keep, looking at every language split at once.

    Tries ``{language}_{region}``, then ``{language}``, then ``en``. If none of them is available every
    language split is kept, an app missing its strings may not start at all.
    """
    qualifiers = {e.config.qualifier.lower() for e in entries if e.config.type == SplitType.LANGUAGE}

    candidates = []
    if device.region:
        candidates.append(f'{device.language}_{device.region}'.lower())
    candidates.extend((device.language.lower(), _FALLBACK_LANGUAGE))

    wanted: Optional[str] = next((c for c in candidates if c in qualifiers), None)
    if wanted is None:
        if qualifiers:
            logger.debug('No language split matches %r, selecting all of: %s', candidates, sorted(qualifiers))
        return lambda qualifier: True
    logger.debug('Selecting language split %r', wanted)
    return lambda qualifier: qualifier.lower() == wanted


def select_for_device(entries: Iterable[PackageEntry], device: DeviceProfile) -> FrozenSet[PackageEntry]:
    """
    Select the apks to install on a device.

    - The base apk and the unclassified splits are always selected.
    - ABI splits: only the one matching the device's primary ABI.
    - Density splits: ``nodpi`` and ``anydpi``, and the one matching the device's density bucket.
    - Language splits: language and region, else language only, else ``en``, else all of them.

    If no split could be classified at all, everything is selected.

    >>> select_for_device(enrich_entries(entries), DeviceProfile.from_values('arm64-v8a', 440, 'en-US'))

    Args:
        entries: Classified entries (see :func:`splitapk.classifier.enrich_entries`).
        device: The device to select for.
    Returns:
        The selected entries.
    """
    entries = tuple(entries)
    if not any(e.config.is_classified for e in entries):
        return frozenset(entries)

    language_matches = _language_matcher(entries, device)
    selected = set()
    for entry in entries:
        config = entry.config
        if config.type == SplitType.NONE:
            keep = True
        elif config.type == SplitType.ABI:
            keep = config.qualifier.lower() == device.primary_abi.lower()
        elif config.type == SplitType.DENSITY:
            keep = config.qualifier.lower() in _ANY_DENSITY or \
                   config.qualifier.lower() == device.density_qualifier.lower()
        elif config.type == SplitType.LANGUAGE:
            keep = language_matches(config.qualifier)
        else:
            raise ValueError(f'Unknown split type: {config.type!r}')
        if keep:
            selected.add(entry)
    return frozenset(selected)


def has_base(entries: Iterable[PackageEntry]) -> bool:
    """Check if any of the entries is a base apk."""
    return any(e.is_base for e in entries)


def validate_selection(
        selection: Iterable[PackageEntry],
        entries: Optional[Iterable[PackageEntry]] = None
) -> bool:
    """
    Check if a selection can be installed: it is not empty and contains the base apk.

    Args:
        selection: The selected entries.
        entries: All the entries the selection was made from. If given and none of them is a base apk,
            any non-empty selection is valid.
    """
    selection = tuple(selection)
    if not selection:
        return False
    if entries is not None and not has_base(entries):
        return True
    return has_base(selection)


def toggle_entry(selection: Iterable[PackageEntry], entry: PackageEntry) -> FrozenSet[PackageEntry]:
    """
    Add the entry to the selection, or remove it if already selected.

    Args:
        selection: The current selection.
        entry: The entry to toggle.
    Returns:
        The new selection.
    Raises:
        ValueError: If the entry is the base apk and it is selected (the base apk cannot be removed).
    """
    selection = frozenset(selection)
    if entry in selection:
        if entry.is_base:
            raise ValueError(f"'{entry.name}' is the base apk and cannot be deselected")
        return selection - {entry}
    return selection | {entry}
