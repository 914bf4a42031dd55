from enum import Enum
from typing import NamedTuple, Optional


class Abi(Enum):
    """
    Android supported ABIs.

    See `Android documentation <https://developer.android.com/ndk/guides/abis>`_.

    Split file names carry the ABI with underscores (``split_config.arm64_v8a.apk``) while the platform reports it
    with dashes (``arm64-v8a``), use :attr:`qualifier` to get the file name form.

    Attributes:
        ARM: armeabi
        ARM7: armeabi-v7a
        ARM64: arm64-v8a
        X86: x86
        X86_64: x86_64
        MIPS: mips
        MIPS64: mips64
        UNKNOWN: Unknown ABI
    """
    ARM = 'armeabi'
    ARM7 = 'armeabi-v7a'
    ARM64 = 'arm64-v8a'
    X86 = 'x86'
    X86_64 = 'x86_64'
    MIPS = 'mips'
    MIPS64 = 'mips64'
    UNKNOWN = 'unknown'

    @property
    def qualifier(self) -> str:
        """The ABI as it appears in split file names (e.g. ``arm64_v8a``)."""
        return self.value.replace('-', '_')

    @classmethod
    def from_qualifier(cls, qualifier: str) -> 'Abi':
        """Get the ABI from either form (``arm64_v8a`` or ``arm64-v8a``), case-insensitive."""
        lowered = qualifier.strip().lower()
        for abi in cls:
            if lowered in (abi.value, abi.qualifier):
                return abi
        return cls.UNKNOWN

    @classmethod
    def _missing_(cls, value):
        return cls.UNKNOWN

    def __repr__(self):
        return f'Abi.{self.name}'


class SplitType(Enum):
    """
    Split types.

    Attributes:
        ABI: Native code for a single ABI (e.g. ``arm64_v8a``).
        DENSITY: Resources for a screen density bucket (e.g. ``xxhdpi``).
        LANGUAGE: Resources for a locale (e.g. ``en``, ``pt_BR``).
        NONE: The base apk, a feature split or any split that could not be classified.
    """
    ABI = 'abi'
    DENSITY = 'density'
    LANGUAGE = 'language'
    NONE = 'none'

    def __repr__(self):
        return f'SplitType.{self.name}'


class SplitConfig(NamedTuple):
    """
    The configuration a split apk targets.

    >>> SplitConfig.abi('arm64_v8a')
    SplitConfig(type=SplitType.ABI, qualifier='arm64_v8a')
    >>> SplitConfig.NONE.qualifier is None
    True

    Attributes:
        type: The kind of configuration.
        qualifier: The qualifier as written in the file name (case preserved), ``None`` for ``SplitType.NONE``.
    """
    type: SplitType
    qualifier: Optional[str] = None

    @classmethod
    def abi(cls, qualifier: str) -> 'SplitConfig':
        return cls(SplitType.ABI, qualifier)

    @classmethod
    def density(cls, qualifier: str) -> 'SplitConfig':
        return cls(SplitType.DENSITY, qualifier)

    @classmethod
    def language(cls, qualifier: str) -> 'SplitConfig':
        return cls(SplitType.LANGUAGE, qualifier)

    @property
    def is_classified(self) -> bool:
        return self.type != SplitType.NONE

    @property
    def label(self) -> str:
        """Human readable description (e.g. ``ABI: arm64_v8a``)."""
        if self.type == SplitType.ABI:
            return f'ABI: {self.qualifier}'
        elif self.type == SplitType.DENSITY:
            return f'Density: {self.qualifier}'
        elif self.type == SplitType.LANGUAGE:
            return f'Language: {self.qualifier}'
        elif self.type == SplitType.NONE:
            return 'None'
        raise ValueError(f'Unknown split type: {self.type!r}')


SplitConfig.NONE = SplitConfig(SplitType.NONE)


class PackageEntry(NamedTuple):
    """
    An apk file found in an archive or a folder.

    Attributes:
        name: The file name, including the extension (e.g. ``split_config.en.apk``).
        size: The file size in bytes (informational only).
        is_base: Whether this is the base apk.
        config: The configuration this split targets (``SplitConfig.NONE`` for the base apk).
    """
    name: str
    size: int = 0
    is_base: bool = False
    config: SplitConfig = SplitConfig.NONE

    def as_dict(self):
        """Return a dict representation of the entry."""
        return {
            'name': self.name,
            'size': self.size,
            'is_base': self.is_base,
            'type': self.config.type.value,
            'qualifier': self.config.qualifier,
        }
