import json

import pytest

from ttt_arm_control.cli import build_parser, interactive_menu, run_behavior, run_recipe


@pytest.fixture
def calls():
    return []


@pytest.fixture
def behaviors(calls):
    def recorder(name, ok=True):
        def fn(**kwargs):
            calls.append((name, kwargs))
            return ok
        return fn

    def place_token(cell_index):
        calls.append(("place_token", {"cell_index": cell_index}))
        return 0 <= cell_index < 9

    return {
        "move_to_standby": recorder("move_to_standby"),
        "pick_up_token": recorder("pick_up_token"),
        "place_token": place_token,
    }


def write_recipes(tmp_path, recipes):
    path = tmp_path / "recipes.json"
    path.write_text(json.dumps(recipes))
    return path


def test_recipe_runs_steps_in_order(tmp_path, behaviors, calls):
    path = write_recipes(tmp_path, {"turn": [
        {"action": "move_to_standby"},
        {"action": "pick_up_token"},
        {"action": "place_token", "cell_index": 4},
    ]})

    assert run_recipe(behaviors, "turn", path) is True
    assert calls == [
        ("move_to_standby", {}),
        ("pick_up_token", {}),
        ("place_token", {"cell_index": 4}),
    ]


def test_recipe_stops_at_failed_step(tmp_path, behaviors, calls):
    path = write_recipes(tmp_path, {"turn": [
        {"action": "place_token", "cell_index": 12},
        {"action": "move_to_standby"},
    ]})

    assert run_recipe(behaviors, "turn", path) is False
    assert calls == [("place_token", {"cell_index": 12})]


def test_recipe_errors(tmp_path, behaviors, calls):
    path = write_recipes(tmp_path, {"turn": [{"action": "dance"}]})
    assert run_recipe(behaviors, "turn", path) is False
    assert run_recipe(behaviors, "missing", path) is False
    assert run_recipe(behaviors, "turn", tmp_path / "none.json") is False
    assert calls == []


def test_run_behavior_parses_cell_index(behaviors, calls):
    assert run_behavior(behaviors, "place_token", ["4"]) is True
    assert calls == [("place_token", {"cell_index": 4})]
    assert run_behavior(behaviors, "fly", []) is False


def test_interactive_menu(behaviors, calls):
    answers = iter(["1", "place_token", "7", "9", "q"])
    interactive_menu(behaviors, read=lambda prompt: next(answers))
    assert calls == [("move_to_standby", {}), ("place_token", {"cell_index": 7})]


def test_parser_requires_limb():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["pick_up_token"])
    args = build_parser().parse_args(["--limb", "left", "place_token", "4"])
    assert (args.limb, args.behavior, args.behavior_args) == ("left", "place_token", ["4"])


def test_run_behavior_rejects_non_integer_argument(behaviors, calls):
    assert run_behavior(behaviors, "place_token", ["x"]) is False
    assert calls == []
