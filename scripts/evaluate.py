#!/usr/bin/env python3
"""
评估脚本

Usage:
    python scripts/evaluate.py --games 100 --opponent greedy
    python scripts/evaluate.py --games 50 --discard-sims 200 --peg-sims 60 --output results.json
    python scripts/evaluate.py --tournament --games 20
"""
import argparse
import logging
import sys
from pathlib import Path
import json

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from core.config import GameConfig
from decision import SearchConfig
from env import CribbageEnv
from evaluation import (
    Evaluator,
    RandomAgent,
    GreedyAgent,
    MonteCarloAgent,
    Arena,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="Cribbage Evaluation")

    # 模式
    parser.add_argument("--tournament", action="store_true", help="Run round robin between all agents")

    # 评估参数
    parser.add_argument("--games", type=int, default=100, help="Number of games")
    parser.add_argument(
        "--opponent",
        type=str,
        default="greedy",
        choices=["random", "greedy"],
        help="Opponent type",
    )
    parser.add_argument("--seed", type=int, default=0, help="Base seed")

    # 决策参数
    parser.add_argument("--discard-sims", type=int, default=400)
    parser.add_argument("--peg-sims", type=int, default=180)
    parser.add_argument("--no-house-789", action="store_true", help="Disable the 7-8-9 house bonus")

    # 其他
    parser.add_argument("--output", type=str, help="Output file for results")
    parser.add_argument("--verbose", action="store_true", help="Verbose output")

    return parser.parse_args()


def make_env_fn(args):
    config = GameConfig(house_789=not args.no_house_789)
    return lambda: CribbageEnv(config=config)


def make_search_config(args) -> SearchConfig:
    return SearchConfig(
        discard_simulations=args.discard_sims,
        pegging_simulations=args.peg_sims,
    )


def evaluate_single(args):
    """评估蒙特卡洛智能体"""
    agent = MonteCarloAgent(make_search_config(args), name="monte_carlo")
    if args.opponent == "random":
        opponent = RandomAgent("random", seed=args.seed)
    else:
        opponent = GreedyAgent("greedy")

    logger.info(f"Evaluating {agent.name} vs {opponent.name} over {args.games} games")

    evaluator = Evaluator(env_fn=make_env_fn(args))
    result = evaluator.evaluate(
        agent=agent,
        opponent=opponent,
        n_games=args.games,
        seed=args.seed,
        verbose=args.verbose,
    )

    logger.info("=" * 50)
    logger.info("Evaluation Results")
    logger.info("=" * 50)
    logger.info(f"Win Rate: {result.win_rate:.2%}")
    logger.info(f"Average Points: {result.avg_points:.1f}")
    logger.info(f"Average Margin: {result.avg_margin:+.1f} (std {result.extra_stats['margin_std']:.1f})")
    logger.info(f"Average Rounds: {result.avg_rounds:.1f}")
    logger.info("=" * 50)

    if args.output:
        with open(args.output, "w") as f:
            json.dump({
                "opponent": opponent.name,
                "win_rate": result.win_rate,
                "avg_points": result.avg_points,
                "avg_margin": result.avg_margin,
                "avg_rounds": result.avg_rounds,
                "games_played": result.games_played,
                **result.extra_stats,
            }, f, indent=2)
        logger.info(f"Results saved to {args.output}")

    return result


def run_tournament(args):
    """运行循环赛"""
    agents = [
        MonteCarloAgent(make_search_config(args), name="monte_carlo"),
        GreedyAgent("greedy"),
        RandomAgent("random", seed=args.seed),
    ]
    logger.info(f"Running round robin with {len(agents)} agents, {args.games} games per pairing")

    arena = Arena(env_fn=make_env_fn(args))
    result = arena.round_robin(agents, games_per_match=args.games, seed=args.seed)

    logger.info("=" * 50)
    logger.info("Tournament Results")
    logger.info("=" * 50)

    ranking = result.get_ranking()
    for i, (name, win_rate) in enumerate(ranking):
        stats = result.standings[name]
        logger.info(
            f"{i+1}. {name}: {win_rate:.2%} "
            f"(margin {stats['avg_margin']:+.1f}, skunks {stats['skunk_rate']:.2%})"
        )

    logger.info("=" * 50)

    if args.output:
        with open(args.output, "w") as f:
            json.dump({
                "rankings": ranking,
                "standings": result.standings,
                "total_games": result.total_games,
            }, f, indent=2)
        logger.info(f"Results saved to {args.output}")

    return result


def main():
    args = parse_args()
    if args.games <= 0:
        logger.error("--games must be positive")
        sys.exit(1)

    if args.tournament:
        run_tournament(args)
    else:
        evaluate_single(args)


if __name__ == "__main__":
    main()
