"""
The entry point for the CLI tool.

Every command starts the client, which reads the whole fleet, runs at most
one action, and prints what the client sees afterwards as JSON.
"""
import argparse
import json
import sys
from typing import List

import uvloop

from bikeshare import logger
from bikeshare.app import build_app
from bikeshare.config import client_mode
from bikeshare.gateway import GatewayError
from bikeshare.models import ActionResult, BikeSnapshot
from bikeshare.serializer import ClientViewSchema
from bikeshare.service import RentalOrchestrator
from bikeshare.version import __version__, name


def parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog=name, description="Rent, inspect and return bikes on the ledger.")
    ap.add_argument("--version", action="version", version=f"{name} {__version__}")
    ap.add_argument("--mode", default=client_mode, help="development runs against in-memory ledgers")
    commands = ap.add_subparsers(dest="command", required=True)

    commands.add_parser("status", help="show the account, the fee and the fleet")
    commands.add_parser("bikes", help="show the fleet")

    for command, help_text in (("use", "pay the fee to use a bike"),
                               ("inspect", "start inspecting a bike"),
                               ("return", "return a bike you use or inspect")):
        sub = commands.add_parser(command, help=help_text)
        sub.add_argument("index", type=int)

    commands.add_parser("register", help="register with the token ledger")
    commands.add_parser("unregister", help="unregister from the token ledger, burning any balance")

    transfer = commands.add_parser("transfer", help="give tokens to another account")
    transfer.add_argument("receiver")
    transfer.add_argument("amount", type=int, nargs="?", help="defaults to the fee")

    balance = commands.add_parser("balance", help="show the token balance of an account")
    target = balance.add_mutually_exclusive_group()
    target.add_argument("account", nargs="?", help="defaults to your own account")
    target.add_argument("--fleet", action="store_true", help="show the balance the fleet has collected")

    return ap


async def perform(orchestrator: RentalOrchestrator, args) -> ActionResult:
    """Runs the action the command names, if any."""
    if args.command == "use":
        return await orchestrator.use(args.index)
    if args.command == "inspect":
        return await orchestrator.inspect(args.index)
    if args.command == "return":
        return await orchestrator.return_bike(args.index)
    if args.command == "register":
        return await orchestrator.register()
    if args.command == "unregister":
        return await orchestrator.unregister()
    if args.command == "transfer":
        return await orchestrator.transfer(args.receiver, args.amount)
    if args.command == "balance":
        if args.fleet:
            return await orchestrator.check_fleet_balance()
        if args.account:
            return await orchestrator.check_balance(args.account)
        return await orchestrator.check_my_balance()
    return ActionResult.success()


def offered_actions(bike: BikeSnapshot, account_id: str) -> List[str]:
    """The commands that make sense for the bike as it was last read."""
    actions = ["use", "inspect"] if bike.can_use() else []
    if bike.can_return(account_id):
        actions.append("return")
    return actions


def render(orchestrator: RentalOrchestrator, command: str, result: ActionResult) -> dict:
    client_view = orchestrator.view()
    view = ClientViewSchema().dump(client_view)
    for bike, data in zip(client_view.fleet, view["bikes"]):
        data["actions"] = offered_actions(bike, client_view.account.account_id)
    if command == "bikes":
        view = {"bikes": view["bikes"]}
    elif command == "balance":
        view = {"balance": view["balance"]}
    return {
        "ok": result.ok,
        "error": str(result.error) if result.error is not None else None,
        **view,
    }


async def main(args) -> int:
    app = build_app(args.mode)
    app.freeze()
    try:
        await app.startup()
    except GatewayError as error:
        logger.error("Could not read the ledgers: %s", error)
        await app.cleanup()
        return 2

    try:
        orchestrator = app['rental_orchestrator']
        result = await perform(orchestrator, args)
        print(json.dumps(render(orchestrator, args.command, result), indent=2))
    finally:
        await app.cleanup()

    return 0 if result else 1


def run(argv=None):
    """Parses the command line and runs the command."""
    args = parser().parse_args(argv)
    sys.exit(uvloop.run(main(args)))


if __name__ == '__main__':
    run()
