"""
Circuit Trap Solver - Entry Point

Runs the episode loop against an oracle with the selected strategy.

Example:
    python main.py
    python main.py --strategy coordinate --skill 105 --episodes 50
    python main.py --size 4 --seed 7 --debug
"""

import sys
import logging
import argparse
from pathlib import Path
from typing import Optional

from trapsolver.difficulty import SkillDifficultyHint
from trapsolver.episode_runner import EpisodeRunner, EpisodeTiming
from trapsolver.oracle import available_oracles, create_oracle
from trapsolver.settings import SETTINGS_FILE, load_settings, policy_settings, save_settings
from trapsolver.solver import (
    SearchPolicy,
    create_strategy,
    get_strategy_info,
    get_strategy_names,
)


logger = logging.getLogger(__name__)


def setup_logging(debug: bool) -> None:
    """Configure logging - output to both console and file."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=[
            logging.StreamHandler(),  # Console output
            logging.FileHandler("solver.log", mode='w', encoding='utf-8')  # File output
        ]
    )


class Application:
    """
    Main application controller.

    Builds the oracle, strategy and runner from settings and CLI flags.
    """

    def __init__(self, args: argparse.Namespace):
        """
        Initialize the application.

        Args:
            args: Parsed command line arguments (override saved settings)
        """
        self.args = args
        self.config_path = Path(args.config) if args.config else SETTINGS_FILE
        self.settings = load_settings(self.config_path)
        self.runner: Optional[EpisodeRunner] = None

        # CLI flags override saved settings for this run
        if args.strategy:
            self.settings["strategy_name"] = args.strategy
        if args.oracle:
            self.settings["oracle_type"] = args.oracle
        if args.skill is not None:
            self.settings["skill"] = args.skill
        if args.debug:
            self.settings["debug_enabled"] = True

    def setup(self) -> None:
        """Create oracle, strategy and runner."""
        strategy_name = self.settings["strategy_name"]
        policy_config = policy_settings(self.settings, strategy_name)
        if self.args.keep_branches:
            policy_config["keep_branch_history"] = True
        policy = SearchPolicy.from_settings(policy_config)
        strategy = create_strategy(strategy_name, policy=policy)
        hint = SkillDifficultyHint(self.settings["skill"])

        oracle_config = {}
        if self.settings["oracle_type"] == "simulated":
            oracle_config = {
                "sizes": [self.args.size] if self.args.size else hint.allowed_sizes(),
                "path_source": self.args.path_source,
                "seed": self.args.seed,
            }
        oracle = create_oracle(self.settings["oracle_type"], **oracle_config)

        timing = EpisodeTiming.instant() if self.args.fast else EpisodeTiming.from_settings(self.settings)
        self.runner = EpisodeRunner(oracle, strategy, hint=hint, timing=timing)

        if self.args.save_config:
            save_settings(self.settings, self.config_path)

        logger.info(
            f"Application initialized: strategy={strategy.name}, oracle={oracle.name}, "
            f"{hint}, expected {hint.expected_size()}x{hint.expected_size()}"
        )

    def run(self) -> int:
        """
        Run the episode loop.

        Returns:
            Exit code
        """
        try:
            self.runner.run(max_episodes=self.args.episodes)
        except KeyboardInterrupt:
            logger.info("Interrupted")
            self.runner.request_stop()

        stats = self.runner.stats
        print(f"\nEpisodes: {stats.episodes}  {stats.summary()}")
        print(f"  rejected={stats.rejected} lost={stats.lost} exhausted={stats.exhausted} "
              f"unavailable={stats.unavailable} errors={stats.errors} moves={stats.moves_submitted}")

        learned = getattr(self.runner.strategy, "learned_paths", None)
        if learned:
            print("  Learned paths:")
            for path in learned:
                print(f"    {path.size}x{path.size} ({path.count}x): {''.join(m.code for m in path.moves)}")
        return 0


def parse_args(argv=None):
    """Parse command line arguments."""
    strategies = ", ".join(f"{i['name']} ({i['description']})" for i in get_strategy_info())
    parser = argparse.ArgumentParser(
        description="Circuit Trap Solver - solves the trap grid one move at a time",
        epilog=f"Strategies: {strategies}"
    )
    parser.add_argument(
        "--strategy", "-s",
        choices=get_strategy_names(),
        help="Solving strategy (default: from settings)"
    )
    parser.add_argument(
        "--oracle", "-o",
        choices=available_oracles(),
        help="Oracle type (default: from settings)"
    )
    parser.add_argument(
        "--skill",
        type=float,
        help="Trap removal skill used to guess the grid size"
    )
    parser.add_argument(
        "--size",
        type=int,
        choices=[3, 4, 5],
        help="Grid size of simulated puzzles (default: sizes allowed by skill)"
    )
    parser.add_argument(
        "--path-source",
        choices=["library", "random"],
        default="library",
        help="Where simulated puzzles come from (default: library)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for the simulator"
    )
    parser.add_argument(
        "--keep-branches",
        action="store_true",
        help="Remember dead ends across attempts of the same puzzle (coordinate strategy)"
    )
    parser.add_argument(
        "--episodes", "-n",
        type=int,
        help="Stop after this many episodes (default: run until Ctrl+C)"
    )
    parser.add_argument(
        "--fast",
        action="store_true",
        help="Skip waits between episodes"
    )
    parser.add_argument(
        "--config", "-c",
        help=f"Settings file (default: {SETTINGS_FILE})"
    )
    parser.add_argument(
        "--save-config",
        action="store_true",
        help="Write the effective settings back to the settings file"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug logging"
    )
    return parser.parse_args(argv)


def main(argv=None):
    """Initialize and run the Circuit Trap Solver."""
    args = parse_args(argv)

    application = Application(args)
    setup_logging(application.settings.get("debug_enabled", False))
    application.setup()
    sys.exit(application.run())


if __name__ == "__main__":
    main()
