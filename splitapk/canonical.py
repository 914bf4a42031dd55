"""
Canonical split names.

Tools that repackage split apks often add the same affix to every file (e.g. LSPatch turns ``base.apk`` into
``base-430-lspatched.apk``). Stripping the affixes shared by every file of a set, at ``-``/``_`` boundaries,
recovers the names the splits were built with, which is what base detection and qualifier extraction work on.
"""
import logging
from typing import List, Sequence, Tuple

logger = logging.getLogger(__name__)

APK_EXTENSION = '.apk'
SEPARATORS = ('-', '_')


def strip_extension(name: str) -> str:
    """Remove a trailing ``.apk`` (any case) from the name."""
    if name[-len(APK_EXTENSION):].lower() == APK_EXTENSION:
        return name[:-len(APK_EXTENSION)]
    return name


def longest_common_prefix(strings: Sequence[str]) -> str:
    """
    Get the longest common prefix of the strings, compared column by column.

    >>> longest_common_prefix(['split_config.en', 'split_config.fr'])
    'split_config.'
    """
    if not strings:
        return ''
    first = strings[0]
    min_len = min(len(s) for s in strings)
    for i in range(min_len):
        if any(s[i] != first[i] for s in strings):
            return first[:i]
    return first[:min_len]


def longest_common_suffix(strings: Sequence[str]) -> str:
    """
    Get the longest common suffix of the strings, compared column by column from the end.

    >>> longest_common_suffix(['base-430-lspatched', 'split_config.en-430-lspatched'])
    '-430-lspatched'
    """
    if not strings:
        return ''
    first = strings[0]
    min_len = min(len(s) for s in strings)
    for i in range(1, min_len + 1):
        if any(s[-i] != first[-i] for s in strings):
            return first[len(first) - i + 1:]
    return first[len(first) - min_len:]


def _last_separator(text: str) -> int:
    return max(text.rfind(sep) for sep in SEPARATORS)


def _first_separator(text: str) -> int:
    found = [i for i in (text.find(sep) for sep in SEPARATORS) if i >= 0]
    return min(found) if found else -1


def common_affixes(stems: Sequence[str]) -> Tuple[str, str]:
    """
    Get the prefix and suffix shared by every stem, cut at separator boundaries.

    The prefix is the common prefix up to (and including) its last separator, the suffix is computed on the
    prefix-stripped stems and starts at the first separator of their common suffix. With fewer than two stems
    nothing can be inferred and both are empty.

    Args:
        stems: File names without extension.
    Returns:
        A ``(prefix, suffix)`` tuple, each may be empty.
    """
    if len(stems) < 2:
        return '', ''

    raw_prefix = longest_common_prefix(stems)
    prefix_end = _last_separator(raw_prefix)
    prefix = raw_prefix[:prefix_end + 1] if prefix_end >= 0 else ''

    after_prefix = [stem[len(prefix):] for stem in stems]
    raw_suffix = longest_common_suffix(after_prefix)
    suffix_start = _first_separator(raw_suffix)
    suffix = raw_suffix[suffix_start:] if suffix_start >= 0 else ''

    logger.debug('Inferred affixes for %d names: prefix=%r, suffix=%r', len(stems), prefix, suffix)
    return prefix, suffix


def strip_affixes(stem: str, prefix: str, suffix: str) -> str:
    """Remove ``prefix`` and ``suffix`` from the stem (each only if present)."""
    if prefix and stem.startswith(prefix):
        stem = stem[len(prefix):]
    if suffix and stem.endswith(suffix):
        stem = stem[:-len(suffix)]
    return stem


def compute_canonical_names(names: Sequence[str]) -> List[str]:
    """
    Get the canonical name of every file name: the extension and the affixes shared by all the names removed.

    >>> compute_canonical_names(['base-430-lspatched.apk', 'split_config.en-430-lspatched.apk'])
    ['base', 'split_config.en']
    >>> compute_canonical_names(['app.apk'])
    ['app']

    Args:
        names: File names (e.g. ``['base.apk', 'split_config.en.apk']``).
    Returns:
        The canonical names, in the same order as ``names``.
    """
    stems = [strip_extension(name) for name in names]
    prefix, suffix = common_affixes(stems)
    return [strip_affixes(stem, prefix, suffix) for stem in stems]
