from types import SimpleNamespace

import pytest

from splitapk.classifier import classify, classify_name, enrich_entries, extract_qualifier, resolve_base
from splitapk.models import PackageEntry, SplitConfig, SplitType


class TestExtractQualifier:

    @pytest.mark.parametrize('name, qualifier', [
        ('split_config.en', 'en'),
        ('SPLIT_CONFIG.pt_BR', 'pt_BR'),
        ('split_config_arm64_v8a', 'arm64_v8a'),
        ('config.xxhdpi', 'xxhdpi'),
        ('Config.X86', 'X86'),
        ('split_phonesky_webrtc_native_lib.config.x86', 'x86'),
        ('feature.CONFIG.en', 'en'),
        ('a.config.b.config.fr', 'fr'),
        ('a.config.config.en', 'en'),
        ('splİt_feature.config.en', 'en'),
        ('İzmir.config.xxhdpi', 'xxhdpi'),
        ('split_config.', ''),
    ])
    def test_extract(self, name, qualifier):
        assert extract_qualifier(name) == qualifier

    @pytest.mark.parametrize('name', ['unrelated_name', 'base', 'split_feature', 'configuration.en', ''])
    def test_no_marker(self, name):
        assert extract_qualifier(name) is None


class TestClassify:

    @pytest.mark.parametrize('qualifier, split_type', [
        ('x86_64', SplitType.ABI),
        ('arm64_v8a', SplitType.ABI),
        ('ARMEABI_V7A', SplitType.ABI),
        ('mips64', SplitType.ABI),
        ('xxhdpi', SplitType.DENSITY),
        ('TVDPI', SplitType.DENSITY),
        ('nodpi', SplitType.DENSITY),
        ('anydpi', SplitType.DENSITY),
        ('en', SplitType.LANGUAGE),
        ('en_US', SplitType.LANGUAGE),
        ('fil', SplitType.LANGUAGE),
        ('foo', SplitType.LANGUAGE),
        ('feature', SplitType.NONE),
        ('EN', SplitType.NONE),
        ('en_us', SplitType.NONE),
        ('en-US', SplitType.NONE),
        ('', SplitType.NONE),
        (None, SplitType.NONE),
    ])
    def test_priority(self, qualifier, split_type):
        assert classify(qualifier).type == split_type

    def test_qualifier_case_is_kept(self):
        assert classify('X86') == SplitConfig.abi('X86')
        assert classify('XXHDPI') == SplitConfig.density('XXHDPI')
        assert classify('pt_BR') == SplitConfig.language('pt_BR')
        assert classify('feature') == SplitConfig.NONE
        assert classify('feature').qualifier is None

    def test_classify_name(self):
        assert classify_name('split_config.x86_64') == SplitConfig.abi('x86_64')
        assert classify_name('split_config.xxhdpi') == SplitConfig.density('xxhdpi')
        assert classify_name('split_config.en_US') == SplitConfig.language('en_US')
        assert classify_name('foo') == SplitConfig.NONE
        assert classify_name('split_config.') == SplitConfig.NONE
        assert classify_name('split_config.foo_bar') == SplitConfig.NONE


class TestResolveBase:

    def test_single_base(self):
        assert resolve_base(['base.apk']) == {'base.apk'}
        assert resolve_base(['BASE.APK']) == {'BASE.APK'}

    def test_single_non_base(self):
        assert resolve_base(['app.apk']) == set()
        assert resolve_base(['base']) == set()

    def test_empty(self):
        assert resolve_base([]) == set()

    def test_renamed_bundle(self):
        names = ['base-430-lspatched.apk', 'split_config_arm64_v8a-430-lspatched.apk']
        assert resolve_base(names) == {'base-430-lspatched.apk'}

    def test_prefixed_bundle(self):
        names = ['com.app-base.apk', 'com.app-split_config.en.apk', 'com.app-split_config.xxhdpi.apk']
        assert resolve_base(names) == {'com.app-base.apk'}

    def test_no_base(self):
        assert resolve_base(['split_config.en.apk', 'split_config.fr.apk']) == set()

    def test_every_base_is_returned(self):
        assert resolve_base(['base.apk', 'Base.apk', 'split_config.en.apk']) == {'base.apk', 'Base.apk'}

    def test_precomputed_canonical_names(self):
        names = ['a.apk', 'b.apk']
        assert resolve_base(names, ['base', 'b']) == {'a.apk'}


class TestEnrichEntries:

    def test_regular_bundle(self):
        entries = enrich_entries([
            ('split_config.xxhdpi.apk', 30),
            ('split_config.en.apk', 20),
            ('base.apk', 100),
            ('split_config.arm64_v8a.apk', 40),
            ('split_feature.apk', 10),
        ])
        assert entries == [
            PackageEntry('base.apk', 100, True, SplitConfig.NONE),
            PackageEntry('split_config.arm64_v8a.apk', 40, False, SplitConfig.abi('arm64_v8a')),
            PackageEntry('split_config.en.apk', 20, False, SplitConfig.language('en')),
            PackageEntry('split_config.xxhdpi.apk', 30, False, SplitConfig.density('xxhdpi')),
            PackageEntry('split_feature.apk', 10, False, SplitConfig.NONE),
        ]

    def test_renamed_bundle(self):
        entries = enrich_entries([
            ('split_config_arm64_v8a-430-lspatched.apk', 1),
            ('split_config_en-430-lspatched.apk', 1),
            ('base-430-lspatched.apk', 1),
        ])
        assert [(e.name, e.is_base, e.config) for e in entries] == [
            ('base-430-lspatched.apk', True, SplitConfig.NONE),
            ('split_config_arm64_v8a-430-lspatched.apk', False, SplitConfig.abi('arm64_v8a')),
            ('split_config_en-430-lspatched.apk', False, SplitConfig.language('en')),
        ]

    def test_feature_splits(self):
        entries = enrich_entries([
            ('base.apk', 1),
            ('split_phonesky_webrtc_native_lib.apk', 1),
            ('split_phonesky_webrtc_native_lib.config.x86.apk', 1),
        ])
        assert [e.config for e in entries] == [SplitConfig.NONE, SplitConfig.NONE, SplitConfig.abi('x86')]

    def test_splits_without_base(self):
        entries = enrich_entries([('split_config.fr.apk', 1), ('split_config.en.apk', 1)])
        assert [(e.name, e.is_base, e.config) for e in entries] == [
            ('split_config.en.apk', False, SplitConfig.language('en')),
            ('split_config.fr.apk', False, SplitConfig.language('fr')),
        ]

    def test_base_first_then_name(self):
        entries = enrich_entries([('b.apk', 1), ('base.apk', 1), ('a.apk', 1), ('C.apk', 1)])
        assert [e.name for e in entries] == ['base.apk', 'C.apk', 'a.apk', 'b.apk']

    def test_single_apk(self):
        assert enrich_entries([('app.apk', 5)]) == [PackageEntry('app.apk', 5, False, SplitConfig.NONE)]
        assert enrich_entries([('base.apk', 5)]) == [PackageEntry('base.apk', 5, True, SplitConfig.NONE)]

    def test_empty(self):
        assert enrich_entries([]) == []

    def test_negative_size_is_clamped(self):
        assert enrich_entries([('base.apk', -1)])[0].size == 0

    def test_accepts_entries(self):
        raw = [PackageEntry('split_config.en.apk', 2), PackageEntry('base.apk', 1)]
        entries = enrich_entries(raw)
        assert [(e.name, e.size, e.is_base) for e in entries] == [
            ('base.apk', 1, True), ('split_config.en.apk', 2, False)
        ]
        assert entries[1].config == SplitConfig.language('en')

    def test_multiple_bases_are_kept(self, caplog):
        entries = enrich_entries([('base.apk', 1), ('Base.apk', 1), ('split_config.en.apk', 1)])
        assert [(e.name, e.is_base) for e in entries] == [
            ('Base.apk', True), ('base.apk', True), ('split_config.en.apk', False)
        ]
        assert 'Found 2 base apks' in caplog.text

    def test_names_changing_length_when_lowercased(self):
        entries = enrich_entries([('base.apk', 1), ('İzmir.config.xxhdpi.apk', 1)])
        assert [(e.name, e.is_base, e.config) for e in entries] == [
            ('base.apk', True, SplitConfig.NONE),
            ('İzmir.config.xxhdpi.apk', False, SplitConfig.density('xxhdpi')),
        ]

    def test_accepts_lists_and_mappings(self):
        entries = enrich_entries([['base.apk', 1], {'name': 'split_config.en.apk', 'size': 2}])
        assert entries == [
            PackageEntry('base.apk', 1, True, SplitConfig.NONE),
            PackageEntry('split_config.en.apk', 2, False, SplitConfig.language('en')),
        ]

    def test_accepts_objects_with_name_and_size(self):
        entries = enrich_entries([SimpleNamespace(name='base.apk', size=7)])
        assert entries == [PackageEntry('base.apk', 7, True, SplitConfig.NONE)]

    def test_entries_without_name_are_skipped(self, caplog):
        entries = enrich_entries([None, {'size': 3}, ('', 1), [], ('base.apk', 1), ('split_config.fr.apk', 1)])
        assert [e.name for e in entries] == ['base.apk', 'split_config.fr.apk']
        assert caplog.text.count('Skipping entry without a file name') == 4

    @pytest.mark.parametrize('raw', [('base.apk',), ('base.apk', None), ('base.apk', 'abc'), {'name': 'base.apk'}])
    def test_missing_or_invalid_size(self, raw):
        assert enrich_entries([raw]) == [PackageEntry('base.apk', 0, True, SplitConfig.NONE)]
