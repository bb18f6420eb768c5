from datetime import date
from typing import List

import numpy as np
import pytest
from faker import Faker

from pinsynth.config import Config, set_config
from pinsynth.engine import codec
from pinsynth.generator import set_generator


@pytest.fixture(autouse=True)
def _reset_globals(monkeypatch, tmp_path):
    monkeypatch.setenv("PINSYNTH_CONFIG", str(tmp_path / "missing.yaml"))
    set_config(Config())
    set_generator(None)
    yield
    set_config(None)
    set_generator(None)


def _make_personal_pins(birthdates: List[date], is_male: List[bool], seed: int = 0) -> List[str]:
    """Realistic-looking PINs with birth numbers below the non-personal range."""
    rng = np.random.default_rng(seed)
    pins = []
    for d, male in zip(birthdates, is_male):
        band = int(rng.integers(0, 88))
        digit = int(rng.choice([1, 3, 5, 7, 9] if male else [0, 2, 4, 6, 8]))
        pins.append(codec.encode(d, band, digit))
    return pins


@pytest.fixture
def make_personal_pins():
    """Factory building personal PINs for given birthdates and sexes."""
    return _make_personal_pins


@pytest.fixture
def personal_pins() -> List[str]:
    """200 personal PINs, born 1950-2000, about 40% men."""
    fake = Faker()
    Faker.seed(1234)
    birthdates = [
        fake.date_between_dates(date_start=date(1950, 1, 1), date_end=date(2000, 12, 31))
        for _ in range(200)
    ]
    rng = np.random.default_rng(99)
    is_male = list(rng.random(200) < 0.4)
    return _make_personal_pins(birthdates, is_male)
