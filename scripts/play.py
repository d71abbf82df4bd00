#!/usr/bin/env python3
"""
对战脚本

Usage:
    python scripts/play.py --mode watch  # 观看 AI 对战
    python scripts/play.py --mode play   # 与 AI 对战
    python scripts/play.py --mode play --discard-sims 1000 --peg-sims 300
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List
import time

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from core.actions import Action, ActionType
from core.cards import cards_to_str, sort_key
from core.config import GameConfig
from core.pegging import Seat
from core.state import ShowResult
from decision import SearchConfig
from env import CribbageEnv
from evaluation import GreedyAgent, MonteCarloAgent

logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
)
logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="Cribbage Play")

    parser.add_argument(
        "--mode",
        type=str,
        default="watch",
        choices=["watch", "play"],
        help="Mode: watch AI or play against AI",
    )
    parser.add_argument("--games", type=int, default=1, help="Number of games")
    parser.add_argument("--seed", type=int, default=None, help="Shuffle seed")
    parser.add_argument("--delay", type=float, default=0.5, help="Delay between moves")

    # 决策参数
    parser.add_argument("--discard-sims", type=int, default=400, help="Simulations per discard option")
    parser.add_argument("--peg-sims", type=int, default=180, help="Rollouts per pegging card")
    parser.add_argument("--no-house-789", action="store_true", help="Disable the 7-8-9 house bonus")
    parser.add_argument("--debug", action="store_true", help="Log engine decisions")

    return parser.parse_args()


def print_game_state(env: CribbageEnv, seat: Seat):
    """打印游戏状态 (只显示 seat 一方的手牌)"""
    obs = env.observation(seat)

    print("\n" + "=" * 60)
    print(env.render())
    print("-" * 60)
    hand = sorted(obs.hand, key=sort_key)
    print(f"[{seat.value}] 手牌: {cards_to_str(hand)}")
    if obs.pegging is not None:
        print(f" 对手剩余: {obs.opponent_cards_left} 张")
    print("=" * 60)


def print_show(show: ShowResult):
    """打印亮牌明细"""
    pone = show.dealer.other
    print("\n" + "-" * 60)
    print(f"Show (starter {show.starter})")
    print(f"  {pone.value:>6} hand: {show.pone_score.total:2d}  {show.pone_score}")
    print(f"  {show.dealer.value:>6} hand: {show.dealer_score.total:2d}  {show.dealer_score}")
    print(f"  {show.dealer.value:>6} crib: {show.crib_score.total:2d}  {show.crib_score}")
    print("-" * 60)


def build_configs(args):
    game_config = GameConfig(house_789=not args.no_house_789)
    search_config = SearchConfig(
        discard_simulations=args.discard_sims,
        pegging_simulations=args.peg_sims,
    )
    return game_config, search_config


def prompt_action(legal_actions: List[Action]) -> Action:
    """让玩家选择动作，输入无效时重新提示"""
    print("\n可选动作:")
    for i, action in enumerate(legal_actions):
        print(f"  {i}: {action}")

    while True:
        choice = input("\n请选择动作编号 (或输入 'q' 退出): ").strip()
        if choice.lower() == 'q':
            raise KeyboardInterrupt
        try:
            idx = int(choice)
        except ValueError:
            print("请输入数字")
            continue
        if 0 <= idx < len(legal_actions):
            return legal_actions[idx]
        print("无效选择，请重试")


def run_game(env: CribbageEnv, agents, game_seed, dealer: Seat, human: bool, delay: float):
    """进行一局游戏，返回最终状态"""
    obs, info = env.reset(seed=game_seed, first_dealer=dealer)
    for agent in agents.values():
        agent.reset(env.rng)
    done = env.state.is_finished
    shows_printed = 0

    while not done:
        seat = env.current_seat
        legal_actions = env.get_legal_actions()

        if human and seat is Seat.PLAYER:
            print_game_state(env, seat)
            action = prompt_action(legal_actions)
            print(f"\n你: {action}")
        else:
            if not human:
                print_game_state(env, seat)
            action = agents[seat].act(obs, legal_actions)
            if human and action.action_type == ActionType.DISCARD:
                print(f"\n{agents[seat].name}: 弃牌完成")
            else:
                print(f"\n{agents[seat].name}: {action}")
            time.sleep(delay)

        obs, reward, terminated, truncated, info = env.step(action)
        if "error" in info:
            print(f"非法动作: {info['error']}")
            continue
        done = terminated or truncated

        shows = env.shows
        for show in shows[shows_printed:]:
            print_show(show)
        shows_printed = len(shows)

    return env.state


def watch_game(args):
    """观看 AI 对战 (蒙特卡洛 vs 贪心)"""
    game_config, search_config = build_configs(args)
    env = CribbageEnv(config=game_config)
    agents = {
        Seat.PLAYER: GreedyAgent("Greedy"),
        Seat.AI: MonteCarloAgent(search_config, name="MonteCarlo"),
    }

    for game_idx in range(args.games):
        print(f"\n{'='*60}")
        print(f"Game {game_idx + 1}/{args.games}")
        print("=" * 60)

        game_seed = args.seed + game_idx if args.seed is not None else None
        dealer = Seat.PLAYER if game_idx % 2 == 0 else Seat.AI
        state = run_game(env, agents, game_seed, dealer, human=False, delay=args.delay)

        print("\n" + "=" * 60)
        print(f"游戏结束! 胜者: {agents[state.winner].name}")
        print(f"比分: {state.scores.player} - {state.scores.ai}, 共 {state.round_number} 局")
        print("=" * 60)


def play_game(args):
    """与 AI 对战 (玩家坐 PLAYER 座位)"""
    game_config, search_config = build_configs(args)
    env = CribbageEnv(config=game_config)
    agents = {Seat.AI: MonteCarloAgent(search_config, name="AI")}

    for game_idx in range(args.games):
        print(f"\n{'='*60}")
        print(f"Game {game_idx + 1}/{args.games}")
        print("=" * 60)

        game_seed = args.seed + game_idx if args.seed is not None else None
        dealer = Seat.PLAYER if game_idx % 2 == 0 else Seat.AI
        try:
            state = run_game(env, agents, game_seed, dealer, human=True, delay=args.delay)
        except KeyboardInterrupt:
            print("\n退出游戏")
            return

        print("\n" + "=" * 60)
        if state.winner is Seat.PLAYER:
            print("恭喜你赢了!")
        else:
            print("你输了!")
        print(f"比分: 你 {state.scores.player} - AI {state.scores.ai}")
        print("=" * 60)


def main():
    args = parse_args()
    if args.debug:
        logging.getLogger("decision").setLevel(logging.DEBUG)

    print("=" * 60)
    print("Cribbage")
    print("=" * 60)

    if args.mode == "watch":
        watch_game(args)
    elif args.mode == "play":
        play_game(args)


if __name__ == "__main__":
    main()
