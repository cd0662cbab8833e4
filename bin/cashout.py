"""Print final totals and settlements for a saved game.

Usage: uv run python bin/cashout.py [game_id]

Without a game id, lists saved games newest first. Reads the store
location from TRACKER_STORAGE_FILE (see shared.settings.StorageSettings).
"""

import asyncio
import sys
from fractions import Fraction
from pathlib import Path

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "backend"))

from shared.logging import setup_logging
from shared.settings import StorageSettings
from shared.storage import FileKeyValueStore
from tracker.logic.game import cash_out, sort_games_newest_first
from tracker.persistence import TrackerRepository


def format_amount(amount: Fraction) -> str:
    return f"${float(amount):.2f}"


async def main() -> None:
    if len(sys.argv) > 2:
        print(f"Usage: {sys.argv[0]} [game_id]")
        sys.exit(1)

    settings = StorageSettings()
    setup_logging(log_dir=settings.log_dir)
    repository = TrackerRepository(FileKeyValueStore(settings.storage_file))

    if len(sys.argv) == 1:
        games = sort_games_newest_first(await repository.load_games())
        if not games:
            print("No saved games.")
        for game in games:
            names = ", ".join(player.display_name for player in game.players)
            print(f"{game.id}  {game.created_at:%Y-%m-%d %H:%M}  rounds={len(game.rounds)}  {names}")
        return

    game = await repository.get_game(sys.argv[1])
    if game is None:
        print(f"Error: no saved game with id {sys.argv[1]!r}")
        sys.exit(1)

    totals, plan = cash_out(game)

    print("Totals:")
    for player in game.players:
        print(f"  {player.display_initials:<4} {player.display_name:<24} {float(totals[player.id]):.2f}")

    if not plan.direct and not plan.optimized:
        print("No settlements needed - everyone is even.")
        return

    print("Optimized settlements:")
    for settlement in plan.optimized:
        print(
            f"  {settlement.from_player.display_name} pays "
            f"{settlement.to_player.display_name} {format_amount(settlement.amount)}",
        )

    print("Direct settlements:")
    for settlement in plan.direct:
        print(
            f"  {settlement.from_player.display_name} pays "
            f"{settlement.to_player.display_name} {format_amount(settlement.amount)}",
        )


if __name__ == "__main__":
    asyncio.run(main())
