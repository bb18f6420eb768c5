from datetime import date
import math

import numpy as np
import pytest

import pinsynth
from pinsynth.config import Config
from pinsynth.engine import checksum, codec
from pinsynth.errors import (
    DecodingError,
    EstimationError,
    ExhaustionError,
    InvalidParameterError,
    InvalidRangeError,
)
from pinsynth.engine.density import DistributionEstimator
from pinsynth.generator import Generator
from pinsynth.types import PinBatch

PERSONAL = "191212121212"


def _generator(**defaults) -> Generator:
    config = Config()
    for key, value in defaults.items():
        setattr(config.defaults, key, value)
    return Generator(config=config, rng=2024)


def _assert_non_personal(batch: PinBatch):
    assert batch.non_personal is True
    for pin in batch:
        assert len(pin) == 12
        assert checksum.verify(pin)
        assert 880 <= int(pin[8:11]) <= 999


# =============================================================================
# GENERATE
# =============================================================================

def test_generate_scenario_ten_day_window_all_male():
    batch = _generator().generate(5, l_birth="1990-01-01", u_birth="1990-01-10", male_prob=1.0, unique=True)

    assert len(batch) == 5
    _assert_non_personal(batch)
    assert len(set(batch)) == 5
    for fields in batch.fields():
        assert fields.is_male
        assert date(1990, 1, 1) <= fields.birthdate <= date(1990, 1, 10)
        assert 88 <= fields.serial_band <= 99


def test_generate_default_bounds():
    batch = _generator().generate(200)
    _assert_non_personal(batch)
    for fields in batch.fields():
        assert date(1900, 1, 1) <= fields.birthdate <= date.today()


def test_generate_accepts_date_objects():
    batch = _generator().generate(3, l_birth=date(2000, 5, 5), u_birth=date(2000, 5, 5))
    assert {f.birthdate for f in batch.fields()} == {date(2000, 5, 5)}


def test_generate_sex_ratio_converges():
    """Two-sided proportion test at n=100,000, p=0.3."""
    n, p = 100_000, 0.3
    batch = _generator().generate(n, male_prob=p)
    males = sum(1 for f in batch.fields() if f.is_male)
    z = (males / n - p) / math.sqrt(p * (1 - p) / n)
    assert abs(z) < 4


def test_generate_unique_up_to_capacity():
    # One day, men only: 12 bands x 5 odd digits
    batch = _generator().generate(60, "1990-01-01", "1990-01-01", male_prob=1.0, unique=True)
    assert len(set(batch)) == 60


def test_generate_beyond_capacity_raises():
    with pytest.raises(ExhaustionError):
        _generator().generate(61, "1990-01-01", "1990-01-01", male_prob=1.0, unique=True)


def test_generate_without_uniqueness_allows_repeats():
    batch = _generator().generate(500, "1990-01-01", "1990-01-01", male_prob=1.0, unique=False)
    assert len(batch) == 500
    assert len(set(batch)) <= 60
    _assert_non_personal(batch)


def test_generate_zero_is_empty_batch():
    batch = _generator().generate(0)
    assert isinstance(batch, PinBatch)
    assert len(batch) == 0
    assert batch.non_personal is True


@pytest.mark.parametrize("count", [-1, 2.5, "3", True])
def test_generate_rejects_bad_count(count):
    with pytest.raises(InvalidParameterError):
        _generator().generate(count)


def test_generate_rejects_bad_arguments():
    gen = _generator()
    with pytest.raises(InvalidParameterError):
        gen.generate(5, male_prob=1.2)
    with pytest.raises(InvalidRangeError):
        gen.generate(5, l_birth="2000-01-02", u_birth="2000-01-01")
    with pytest.raises(InvalidParameterError):
        gen.generate(5, l_birth="yesterday")


def test_generate_is_reproducible():
    a = Generator(config=Config()).generate(20, rng=42)
    b = Generator(config=Config()).generate(20, rng=np.random.default_rng(42))
    assert a.pins == b.pins


def test_generator_seed_from_config():
    config = Config(seed=7)
    assert Generator(config=config).generate(10).pins == Generator(config=config).generate(10).pins


def test_male_fraction():
    batch = _generator().generate(50, male_prob=0.0)
    assert batch.male_fraction() == 0.0
    assert PinBatch().male_fraction() == 0.0


# =============================================================================
# ANONYMIZE
# =============================================================================

def test_anonymize_scenario_repeated_pin():
    batch = _generator().anonymize([PERSONAL] * 3, keep_rel=True, unique=True)
    assert len(batch) == 3
    assert len(set(batch)) == 1
    _assert_non_personal(batch)
    assert batch.fields()[0].birthdate == date(1912, 12, 12)
    assert batch.fields()[0].is_male


def test_anonymize_output_is_non_personal(personal_pins):
    batch = _generator().anonymize(personal_pins)
    assert len(batch) == len(personal_pins)
    _assert_non_personal(batch)
    assert not set(batch) & set(personal_pins)


def test_anonymize_respects_observed_bounds(personal_pins):
    observed = [codec.decode(p).birthdate for p in personal_pins]
    lo, hi = min(observed), max(observed)

    batch = _generator().anonymize(personal_pins, l_birth=lo, u_birth=hi)
    for fields in batch.fields():
        assert lo <= fields.birthdate <= hi

    # Same result by default
    batch = _generator().anonymize(personal_pins)
    for fields in batch.fields():
        assert lo <= fields.birthdate <= hi


def test_anonymize_year_bounds_mode(personal_pins):
    observed = [codec.decode(p).birthdate for p in personal_pins]
    lo, hi = date(min(observed).year, 1, 1), date(max(observed).year, 12, 31)

    batch = _generator(bounds="year").anonymize(personal_pins)
    for fields in batch.fields():
        assert lo <= fields.birthdate <= hi


def test_anonymize_explicit_narrow_bounds(personal_pins):
    batch = _generator().anonymize(personal_pins, l_birth="1970-01-01", u_birth="1980-12-31")
    for fields in batch.fields():
        assert date(1970, 1, 1) <= fields.birthdate <= date(1980, 12, 31)


def test_anonymize_keeps_age_distribution(personal_pins):
    observed = np.array([codec.decode(p).birthdate.toordinal() for p in personal_pins])
    batch = _generator().anonymize(personal_pins)
    drawn = np.array([f.birthdate.toordinal() for f in batch.fields()])
    # 200 draws over a 50 year span
    assert abs(drawn.mean() - observed.mean()) < 4 * 365


def test_anonymize_estimates_sex_ratio(make_personal_pins):
    birthdates = [date(1960 + i % 40, 1 + i % 12, 1 + i % 28) for i in range(2000)]
    is_male = [i % 5 == 0 for i in range(2000)]
    source = make_personal_pins(birthdates, is_male)

    batch = _generator().anonymize(source)
    assert batch.male_fraction() == pytest.approx(0.2, abs=0.04)


def test_anonymize_male_prob_override(personal_pins):
    batch = _generator().anonymize(personal_pins, male_prob=0.0)
    assert batch.male_fraction() == 0.0


def test_anonymize_keep_rel_preserves_relations(personal_pins):
    source = personal_pins[:20] + personal_pins[:10] + personal_pins[5:15]
    out = _generator().anonymize(source, keep_rel=True, unique=True)

    assert len(out) == len(source)
    for i in range(len(source)):
        for j in range(len(source)):
            if source[i] == source[j]:
                assert out[i] == out[j]
            else:
                assert out[i] != out[j]


def test_anonymize_without_keep_rel(personal_pins):
    source = [personal_pins[0]] * 5 + personal_pins[:50]
    out = _generator().anonymize(source, keep_rel=False, unique=True)
    assert len(out) == len(source)
    assert len(set(out)) == len(source)
    _assert_non_personal(out)


def test_anonymize_relation_ignores_input_formatting():
    source = [PERSONAL, int(PERSONAL), "19121212-1212", "199001010025"]
    out = _generator().anonymize(source, keep_rel=True)
    assert out[0] == out[1] == out[2]
    assert out[3] != out[0]


def test_anonymize_empty_source():
    batch = _generator().anonymize([])
    assert len(batch) == 0
    assert batch.non_personal is True


def test_anonymize_rejects_invalid_pin():
    with pytest.raises(DecodingError):
        _generator().anonymize([PERSONAL, "191212121213"])


def test_anonymize_single_birthdate_with_wide_bounds():
    batch = _generator().anonymize([PERSONAL] * 3, l_birth="1910-01-01", u_birth="1920-01-01")
    assert len(set(batch)) == 1
    _assert_non_personal(batch)
    fields = batch.fields()[0]
    assert date(1910, 1, 1) <= fields.birthdate <= date(1920, 1, 1)
    assert fields.is_male


def test_anonymize_single_birthdate_all_overridden():
    batch = _generator().anonymize(
        [PERSONAL] * 3, l_birth="1910-01-01", u_birth="1920-01-01", male_prob=0.0
    )
    assert len(batch) == 3
    _assert_non_personal(batch)
    assert batch.male_fraction() == 0.0
    for fields in batch.fields():
        assert date(1910, 1, 1) <= fields.birthdate <= date(1920, 1, 1)


def test_anonymize_single_birthdate_spreads_over_window(make_personal_pins):
    source = make_personal_pins([date(1950, 6, 1)] * 300, [True] * 300)
    batch = _generator().anonymize(
        source, l_birth="1950-01-01", u_birth="1950-12-31", keep_rel=False
    )
    assert len({f.birthdate for f in batch.fields()}) > 50


def test_anonymize_single_pin_year_bounds_mode():
    batch = _generator(bounds="year").anonymize([PERSONAL])
    assert len(batch) == 1
    _assert_non_personal(batch)
    fields = batch.fields()[0]
    assert date(1912, 1, 1) <= fields.birthdate <= date(1912, 12, 31)
    assert fields.is_male


def test_anonymize_estimator_errors_propagate(personal_pins):
    class FailingStrategy:
        def fit(self, samples):
            raise EstimationError("no density")

    gen = Generator(config=Config(), rng=1, estimator=DistributionEstimator(FailingStrategy()))
    with pytest.raises(EstimationError):
        gen.anonymize(personal_pins)


def test_anonymize_uniqueness_exhaustion():
    source = [
        codec.encode(date(1990, 1, 1), band, digit)
        for band in range(13) for digit in (1, 3, 5, 7, 9)
    ][:61]
    # 61 distinct inputs all born the same day, all men: only 60 free numbers
    assert len(set(source)) == 61
    with pytest.raises(ExhaustionError):
        _generator().anonymize(source, keep_rel=True, unique=True)


def test_anonymize_is_reproducible(personal_pins):
    a = Generator(config=Config()).anonymize(personal_pins, rng=5)
    b = Generator(config=Config()).anonymize(personal_pins, rng=5)
    assert a.pins == b.pins


# =============================================================================
# MODULE-LEVEL API
# =============================================================================

def test_module_level_functions():
    batch = pinsynth.generate(5, rng=1)
    assert len(batch) == 5
    _assert_non_personal(batch)

    fake = pinsynth.anonymize([PERSONAL, PERSONAL], rng=1)
    assert fake[0] == fake[1]
    assert pinsynth.is_non_personal(fake[0])


def test_set_generator_is_used():
    gen = Generator(config=Config(), rng=3)
    pinsynth.set_generator(gen)
    assert pinsynth.get_generator() is gen
