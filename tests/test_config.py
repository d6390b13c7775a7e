"""Tests of the runtime parameter store."""

import pytest

from gext import config


def test_defaults():
    assert config.get_param("regularization") == 1e-5
    assert config.get_param("output_precision") == 16


def test_set_and_reset():
    config.set_param("regularization", 1e-3)
    assert config.get_param("regularization") == 1e-3
    config.reset_params()
    assert config.get_param("regularization") == 1e-5


def test_unknown_parameter():
    with pytest.raises(KeyError):
        config.set_param("no_such_knob", 1)
    with pytest.raises(KeyError):
        config.get_param("no_such_knob")
