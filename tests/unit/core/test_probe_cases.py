import pytest

from sivd.core import (
    ALL_CASES,
    DenormalGenerator,
    ProbeCase,
    ProbeConfig,
    TranscendentalGenerator,
    UnknownProbeCaseError,
    VectorGenerator,
)


class TestProbeCaseMembers:
    def test_closed_set(self):
        assert [c.name for c in ProbeCase] == ["DENORMAL", "TRANSCENDENTAL"]
        assert ALL_CASES == (ProbeCase.DENORMAL, ProbeCase.TRANSCENDENTAL)

    def test_display_names(self):
        assert ProbeCase.DENORMAL.display_name == "Enhanced Denormal Numbers Test"
        assert ProbeCase.TRANSCENDENTAL.display_name == "Transcendental Function Test"

    def test_is_str(self):
        assert ProbeCase.DENORMAL == "Enhanced Denormal Numbers Test"

    @pytest.mark.parametrize("case", list(ProbeCase))
    def test_every_member_builds_a_generator(self, case):
        assert isinstance(case.generator(), VectorGenerator)


class TestGeneratorFactory:
    def test_denormal_generator_uses_config(self):
        cfg = ProbeConfig(sample_size=120)
        gen = ProbeCase.DENORMAL.generator(cfg)
        assert isinstance(gen, DenormalGenerator)
        assert gen.expected_length() == 120

    def test_transcendental_generator_uses_config(self):
        cfg = ProbeConfig(sweep_count=3, special_values=(0.5,))
        gen = ProbeCase.TRANSCENDENTAL.generator(cfg)
        assert isinstance(gen, TranscendentalGenerator)
        assert gen.expected_length() == 4 * 9

    def test_default_lengths(self):
        assert ProbeCase.DENORMAL.generator().expected_length() == 1230
        assert ProbeCase.TRANSCENDENTAL.generator().expected_length() == 4653


class TestFromName:
    @pytest.mark.parametrize("name", ["DENORMAL", "denormal", "  Denormal "])
    def test_member_key_case_insensitive(self, name):
        assert ProbeCase.from_name(name) is ProbeCase.DENORMAL

    def test_display_name(self):
        assert ProbeCase.from_name("Transcendental Function Test") is ProbeCase.TRANSCENDENTAL

    def test_member_passes_through(self):
        assert ProbeCase.from_name(ProbeCase.TRANSCENDENTAL) is ProbeCase.TRANSCENDENTAL

    @pytest.mark.parametrize("name", ["bogus", "", None, 3])
    def test_unknown_name_raises(self, name):
        with pytest.raises(UnknownProbeCaseError) as info:
            ProbeCase.from_name(name)
        assert info.value.known == ("DENORMAL", "TRANSCENDENTAL")
