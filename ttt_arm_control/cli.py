#!/usr/bin/env python3
"""
Command-line interface for limb behaviors, with JSON-driven recipes.

    ttt_arm --limb right move_out_of_view
    ttt_arm --limb left place_token 4
    ttt_arm --limb left --recipe play_center -f recipes.json
    ttt_arm --limb left                       # interactive menu
"""
import argparse
import json
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional


def run_behavior(behaviors: Dict[str, Callable[..., bool]], name: str, args: List[str]) -> bool:
    """Run one behavior by name; a single positional argument is a cell index."""
    fn = behaviors.get(name)
    if fn is None:
        print(f"[ERROR] Unknown behavior '{name}'. Available: {', '.join(behaviors)}")
        return False
    try:
        call_args = [int(a) for a in args]
    except ValueError:
        print(f"[ERROR] '{name}' takes integer arguments, got {args}")
        return False
    print(f"▶ Executing {name}({', '.join(str(a) for a in call_args)})")
    return fn(*call_args)


def run_recipe(behaviors: Dict[str, Callable[..., bool]], recipe_name: str, recipe_file: Path) -> bool:
    """
    Load and execute a JSON-defined recipe by name.
    Each step in JSON must have an 'action' matching a behavior name,
    and any additional fields become keyword arguments to the behavior.
    Stops at the first step that fails.
    """
    if not recipe_file.exists():
        print(f"[ERROR] Recipe file not found: {recipe_file}")
        return False
    data = json.loads(recipe_file.read_text())
    steps = data.get(recipe_name)
    if not steps:
        print(f"[ERROR] Recipe '{recipe_name}' not defined in {recipe_file}")
        return False
    for step in steps:
        action = step.get('action')
        fn = behaviors.get(action)
        if fn is None:
            print(f"[ERROR] No behavior mapped for action '{action}'")
            return False
        kwargs = {k: v for k, v in step.items() if k != 'action'}
        print(f"▶ Executing {action}({', '.join(f'{k}={v}' for k, v in kwargs.items())})")
        if not fn(**kwargs):
            print(f"[ERROR] '{action}' failed")
            return False
    print(f"✅ Recipe '{recipe_name}' completed.")
    return True


def interactive_menu(behaviors: Dict[str, Callable[..., bool]], read=input):
    """
    Fallback interactive menu to manually select behaviors.
    """
    names = list(behaviors.keys())
    while True:
        print("\n🔧 Available behaviors:")
        for idx, name in enumerate(names, start=1):
            print(f"  {idx}) {name}")
        print("  q) Quit\n")

        choice = read("Which? ").strip()
        if choice.lower() in ('q', 'quit', 'exit'):
            print("Goodbye!")
            return
        if choice.isdigit():
            idx = int(choice) - 1
            if not 0 <= idx < len(names):
                print(f"[ERROR] Invalid selection: {choice}")
                continue
            name = names[idx]
        else:
            name = choice
        args = []
        if name == 'place_token':
            cell = read("cell_index? ").strip()
            if not cell.lstrip('-').isdigit():
                print(f"[ERROR] Not a cell index: {cell!r}")
                continue
            args = [cell]
        ok = run_behavior(behaviors, name, args)
        print("✅ done" if ok else "❌ failed")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Run tic-tac-toe arm behaviors on one limb; supports JSON recipes.'
    )
    parser.add_argument('--limb', '-l', choices=('left', 'right'), required=True,
                        help='Limb to drive (right = spectator, left = player)')
    parser.add_argument('--config', '-c', default=None,
                        help='Path to arm controller YAML (default: installed config)')
    parser.add_argument('--recipe', '-r',
                        help='Name of the recipe to run from JSON file')
    parser.add_argument('--recipes-file', '-f',
                        default=str(Path.cwd() / 'recipes.json'),
                        help='Path to recipes JSON')
    parser.add_argument('behavior', nargs='?',
                        help='Behavior to run once, e.g. pick_up_token')
    parser.add_argument('behavior_args', nargs='*',
                        help='Behavior arguments, e.g. the cell index for place_token')
    return parser


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)

    from ttt_arm_control.arm_controller_node import ControllerRuntime
    runtime = ControllerRuntime(args.limb, args.config)
    behaviors = runtime.node.behaviors
    try:
        if args.recipe:
            ok = run_recipe(behaviors, args.recipe, Path(args.recipes_file))
        elif args.behavior:
            ok = run_behavior(behaviors, args.behavior, args.behavior_args)
        else:
            interactive_menu(behaviors)
            ok = True
    except KeyboardInterrupt:
        ok = False
    finally:
        runtime.shutdown()
    sys.exit(0 if ok else 1)


if __name__ == '__main__':
    main()
