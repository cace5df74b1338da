from main import build_parser, generated_items, main


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.config is None
    assert args.items is None
    assert args.log_level == "INFO"


def test_generated_items():
    items = generated_items(4)
    assert [item["id"] for item in items] == ["center", "item1", "item2", "item3"]
    assert generated_items(0) == generated_items(1)


def test_missing_config_exits_with_error():
    assert main(["--config", "/nonexistent/menu.yaml"]) == 2


def test_invalid_config_exits_with_error(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("collision:\n  margin: -5\n", encoding="utf-8")
    assert main(["--config", str(path), "--log-level", "ERROR"]) == 2


def test_negative_menu_distance_is_accepted_by_parser():
    args = build_parser().parse_args(["--menu-distance", "-10", "--items", "7"])
    assert args.menu_distance == -10
    assert args.items == 7


def test_unknown_curve_exits_with_error(tmp_path):
    path = tmp_path / "curve.yaml"
    path.write_text("return_to_rest:\n  easing: curve\n  curve: bounce\n",
                    encoding="utf-8")
    assert main(["--config", str(path), "--log-level", "ERROR"]) == 2


def test_malformed_yaml_exits_with_error(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("layout: {menu_distance: 20\n", encoding="utf-8")
    assert main(["--config", str(path), "--log-level", "ERROR"]) == 2
