import asyncio

from expense_tracker.config import load_settings
from expense_tracker.interfaces.charts import format_amount, tx_lines
from expense_tracker.logging_setup import configure_logging
from expense_tracker.services.refresh import PeriodicRefresher
from expense_tracker.services.store import ExpenseStore


# --------------------------------------------------
# Rendering
# --------------------------------------------------
def render_day(store: ExpenseStore) -> str:
    view = store.view()
    lines = []
    if view.alert:
        lines.append(f"⚠️  {store.pop_alert()}")
    lines.append(f"Days: {', '.join(view.days) if view.days else '-'}")
    lines.append(f"\n=== {view.day} ===")
    for label, total in view.totals.as_pairs():
        lines.append(f"  {label:<12} {format_amount(total)}")
    lines.append("")
    for line in tx_lines(view.transactions):
        lines.append(f"  • {line}")
    return "\n".join(lines)


HELP = "Commands: days | day YYYY-MM-DD | refresh | help | exit"


async def handle(command: str, store: ExpenseStore, refresher: PeriodicRefresher) -> bool:
    """Run one command; False means quit."""
    cmd, _, arg = command.partition(" ")
    cmd = cmd.lower()

    if cmd in {"exit", "quit"}:
        return False

    if cmd in {"", "show"}:
        print(render_day(store))
    elif cmd == "days":
        print("\n".join(store.view().days) or "No transactions yet.")
    elif cmd == "day":
        day = arg.strip()
        if day not in store.view().days:
            print(f"No transactions on {day!r}.")
        else:
            store.select_day(day)
            print(render_day(store))
    elif cmd == "refresh":
        # wait() rather than await: a timer tick may cancel this refresh
        await asyncio.wait({refresher.trigger()})
        print(render_day(store))
    else:
        print(HELP)
    return True


async def chat(store: ExpenseStore, refresher: PeriodicRefresher):
    print("\n=== Daily Expenses ===")
    print(HELP + "\n")

    await asyncio.to_thread(store.load_categories)
    await refresher.refresh_once()
    refresher.start(immediate=False)
    print(render_day(store))

    try:
        while True:
            user_input = (await asyncio.to_thread(input, "\n> ")).strip()
            if not await handle(user_input, store, refresher):
                print("Bye 👋")
                break
    except (EOFError, KeyboardInterrupt):
        print("\nBye 👋")
    finally:
        await refresher.stop()


def main():
    settings = load_settings()
    configure_logging(settings.log_level)

    store = ExpenseStore(settings)
    refresher = PeriodicRefresher(store, settings.refresh_seconds)
    asyncio.run(chat(store, refresher))


if __name__ == "__main__":
    main()
