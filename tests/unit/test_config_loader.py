"""
Test config_loader.py: defaults, schema and range validation.
"""

import json

import pytest

from config.config_loader import DEFAULT_CONFIG, load_config, save_config, validate_config


def _write(path, data):
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f)
    return str(path)


class TestLoadConfig:
    def test_overrides_merge_with_defaults(self, tmp_path):
        out_dir = tmp_path / "logs"
        path = _write(tmp_path / "config.json", {"max_steps": 500, "output_directory": str(out_dir)})

        config = load_config(path, verbose=False)

        assert config["max_steps"] == 500
        assert config["step_delay"] == DEFAULT_CONFIG["step_delay"]
        assert out_dir.is_dir()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.json"))

    def test_verbose_prints_summary(self, tmp_path, capsys):
        path = _write(tmp_path / "config.json", {"output_directory": str(tmp_path / "logs")})
        load_config(path, verbose=True)
        out = capsys.readouterr().out
        assert "Loaded config" in out
        assert "max_steps: 10000" in out

    def test_save_and_reload(self, tmp_path):
        config = DEFAULT_CONFIG.copy()
        config["output_directory"] = str(tmp_path / "logs")
        config["sample_seed"] = 7
        path = tmp_path / "saved.json"

        save_config(config, str(path))

        assert load_config(str(path), verbose=False)["sample_seed"] == 7


class TestValidateConfig:
    def test_defaults_are_valid(self):
        validate_config(DEFAULT_CONFIG.copy())

    def test_missing_key(self):
        config = DEFAULT_CONFIG.copy()
        del config["max_steps"]
        with pytest.raises(ValueError, match="max_steps"):
            validate_config(config)

    @pytest.mark.parametrize(
        "key, value",
        [
            ("max_steps", "100"),
            ("max_steps", True),
            ("step_delay", "fast"),
            ("use_jit", 1),
            ("sample_seed", 1.5),
            ("output_directory", None),
        ],
    )
    def test_wrong_type(self, key, value):
        config = DEFAULT_CONFIG.copy()
        config[key] = value
        with pytest.raises(TypeError):
            validate_config(config)

    def test_float_delay_and_int_delay(self):
        config = DEFAULT_CONFIG.copy()
        config["step_delay"] = 1
        validate_config(config)
        config["step_delay"] = 0.05
        validate_config(config)

    @pytest.mark.parametrize(
        "key, value",
        [
            ("max_steps", 0),
            ("step_delay", -0.1),
            ("batch_size", 0),
            ("sample_count", -1),
            ("sample_min_length", 9),
        ],
    )
    def test_out_of_range(self, key, value):
        config = DEFAULT_CONFIG.copy()
        config[key] = value
        with pytest.raises(ValueError):
            validate_config(config)
