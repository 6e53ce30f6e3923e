from __future__ import annotations
import pytest
from pathlib import Path
from rowsync.config.loader import load_config, ConfigError


def test_load_config_success(write_config: Path, orders_xlsx: Path):
    cfg = load_config(write_config)
    assert Path(cfg.workbook) == orders_xlsx
    assert cfg.has_headers is True
    assert cfg.first_data_row == 2
    assert cfg.formatter.input.decimal == "."
    assert cfg.formatter.output.thousand == " "
    assert cfg.sheets["DATA"].columns == {"Updated": "F"}
    assert cfg.sheets["DATA"].keys == ("ProdOrd",)


def test_load_config_minimal_applies_defaults(temp_workdir: Path):
    cfg_path = temp_workdir / "config" / "rowsync.yml"
    cfg_path.write_text("workbook: data/book.xlsx\n", encoding="utf-8")
    cfg = load_config(cfg_path)
    assert cfg.workbook == str(temp_workdir / "data" / "book.xlsx")
    assert cfg.has_headers is True
    assert cfg.first_data_row is None
    assert (cfg.formatter.input.decimal, cfg.formatter.input.thousand) == (".", ",")
    assert (cfg.formatter.output.decimal, cfg.formatter.output.thousand) == (",", " ")
    assert cfg.sheets == {}


def test_load_config_null_separator_is_explicit(temp_workdir: Path):
    cfg_path = temp_workdir / "config" / "rowsync.yml"
    cfg_path.write_text(
        "workbook: book.xlsx\nseparators:\n  input:\n    thousand: null\n", encoding="utf-8"
    )
    cfg = load_config(cfg_path)
    assert cfg.formatter.input.thousand is None
    assert cfg.formatter.input.decimal == "."


def test_load_config_missing_file(temp_workdir: Path):
    missing = temp_workdir / "config" / "not_exists.yml"
    with pytest.raises(ConfigError) as e:
        load_config(missing)
    assert "config file not found" in str(e.value)


def test_load_config_missing_required(write_config: Path):
    text = "\n".join(l for l in write_config.read_text(encoding="utf-8").splitlines() if not l.startswith("workbook:"))
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value) and "required property" in str(e.value)


def test_load_config_invalid_column_letter(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("Updated: F", "Updated: '7'")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


def test_load_config_multi_char_separator(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace('decimal: "."', 'decimal: ".."')
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(write_config)


def test_load_config_extra_field(write_config: Path):
    text = write_config.read_text(encoding="utf-8") + "\nextra_field: not_allowed\n"
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


def test_load_config_invalid_yaml(temp_workdir: Path):
    cfg_path = temp_workdir / "config" / "rowsync.yml"
    cfg_path.write_text("workbook: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(cfg_path)
    assert "invalid yaml" in str(e.value)
