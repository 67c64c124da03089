"""
openbid CLI - Command Line Interface for auction contracts

Auctions and balances are persisted in a SQLite database under the
data directory, so consecutive commands operate on the same state.
"""

import json
import click
from pathlib import Path

from openbid import __version__
from openbid.core.config import load_config
from openbid.utils.logger import setup_from_config
from openbid.utils.validation import MAX_AMOUNT


def _app(ctx):
    """Open (once per invocation) the App over the configured database."""
    from openbid.core.storage import SQLiteStorage
    from openbid.host import App

    if "app" not in ctx.obj:
        config = ctx.obj["config"]
        config.ensure_dirs()
        ctx.obj["app"] = App(SQLiteStorage(config.db_path))
    return ctx.obj["app"]


def _fail(ctx, error):
    click.echo(f"❌ {error}", err=True)
    ctx.exit(1)


def _echo_json(model):
    click.echo(json.dumps(model.model_dump(mode="json"), indent=2))


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--data-dir", default=None, help="Data directory (default: $OPENBID_DATA_DIR or ~/.openbid)")
@click.option("--env-file", default=None, type=click.Path(dir_okay=False), help="Load OPENBID_* settings from a .env file")
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx, debug, data_dir, env_file):
    """openbid - open ascending-price auctions"""
    import logging

    config = load_config(env_file)
    if data_dir:
        config.data_dir = Path(data_dir).expanduser()
    if debug:
        config.log_level = logging.DEBUG

    setup_from_config(config)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


# =============================================================================
# Account Commands
# =============================================================================

@cli.group()
def account():
    """Account balance commands"""
    pass


@account.command("fund")
@click.argument("address")
@click.argument("amount", type=click.IntRange(min=1, max=MAX_AMOUNT))
@click.option("--denom", default="ubtc", help="Denomination to credit")
@click.pass_context
def account_fund(ctx, address, amount, denom):
    """Credit AMOUNT of a denomination to ADDRESS"""
    from openbid.core.errors import ContractError
    from openbid.core.types import checked_add, coin

    app = _app(ctx)
    balances = {c.denom: c.amount for c in app.query_all_balances(address)}

    try:
        balances[denom] = checked_add(balances.get(denom, 0), amount)
        app.init_balance(address, [coin(a, d) for d, a in balances.items()])
    except ContractError as e:
        _fail(ctx, e)

    click.echo(f"✓ Funded {address} with {amount}{denom}")
    click.echo(f"  Balance: {balances[denom]}{denom}")


@account.command("balance")
@click.argument("address")
@click.pass_context
def account_balance(ctx, address):
    """Show all balances of ADDRESS"""
    balances = _app(ctx).query_all_balances(address)
    click.echo(f"Address: {address}")
    if not balances:
        click.echo("  (no funds)")
    for c in balances:
        click.echo(f"  {c.amount} {c.denom}")


# =============================================================================
# Auction Commands
# =============================================================================

@cli.group()
def auction():
    """Auction contract commands"""
    pass


@auction.command("create")
@click.option("--sender", required=True, help="Creator address")
@click.option("--title", required=True, help="Auctioned item title")
@click.option("--owner", default=None, help="Owner address (default: sender)")
@click.option("--commission", default=None, help="Commission rate in [0, 1]")
@click.option("--amount", default=0, type=click.IntRange(min=0, max=MAX_AMOUNT), help="Opening bid attached by the creator")
@click.option("--label", default="", help="Contract label")
@click.pass_context
def auction_create(ctx, sender, title, owner, commission, amount, label):
    """Create a new auction"""
    from openbid.core.auction import BID_DENOM, InstantiateMsg, parse_msg
    from openbid.core.errors import ContractError
    from openbid.core.types import coins
    from openbid.host import AuctionContract

    app = _app(ctx)
    funds = coins(amount, BID_DENOM) if amount else []

    try:
        msg = parse_msg(InstantiateMsg, {
            "owner": owner,
            "auction_item_title": title,
            "commission_percentage": commission,
        })
        contract = AuctionContract.instantiate(app, sender, msg, funds, label)
    except ContractError as e:
        _fail(ctx, e)

    click.echo(f"✓ Auction created: {contract.address}")
    click.echo(f"  Title: {title}")
    click.echo(f"  Owner: {owner or sender}")


@auction.command("bid")
@click.argument("contract_address")
@click.option("--sender", required=True, help="Bidder address")
@click.option("--amount", required=True, type=click.IntRange(min=0, max=MAX_AMOUNT), help="Amount to add to the bid")
@click.pass_context
def auction_bid(ctx, contract_address, sender, amount):
    """Raise SENDER's bid by AMOUNT"""
    from openbid.core.auction import BID_DENOM
    from openbid.core.errors import ContractError
    from openbid.core.types import coins
    from openbid.host import AuctionContract

    contract = AuctionContract(contract_address)
    try:
        response = contract.bid(_app(ctx), sender, coins(amount, BID_DENOM))
    except ContractError as e:
        _fail(ctx, e)

    click.echo(f"✓ Bid accepted: {response.attribute('bid_amount')}")


@auction.command("close")
@click.argument("contract_address")
@click.option("--sender", required=True, help="Owner address")
@click.pass_context
def auction_close(ctx, contract_address, sender):
    """Close bidding (owner only)"""
    from openbid.core.errors import ContractError
    from openbid.host import AuctionContract

    try:
        AuctionContract(contract_address).close_bidding(_app(ctx), sender)
    except ContractError as e:
        _fail(ctx, e)

    click.echo(f"✓ Auction {contract_address} closed")


@auction.command("retract")
@click.argument("contract_address")
@click.option("--sender", required=True, help="Participant address")
@click.option("--to", "withdraw_address", default=None, help="Destination (default: sender)")
@click.pass_context
def auction_retract(ctx, contract_address, sender, withdraw_address):
    """Withdraw a losing bid after close"""
    from openbid.core.errors import ContractError
    from openbid.host import AuctionContract

    try:
        response = AuctionContract(contract_address).retract_funds(
            _app(ctx), sender, withdraw_address
        )
    except ContractError as e:
        _fail(ctx, e)

    for send in response.messages:
        amount = ", ".join(str(c) for c in send.amount)
        click.echo(f"✓ Returned {amount} to {send.to_address}")


@auction.command("status")
@click.argument("contract_address")
@click.pass_context
def auction_status(ctx, contract_address):
    """Show auction status as JSON"""
    from openbid.core.errors import ContractError
    from openbid.host import AuctionContract

    try:
        status = AuctionContract(contract_address).query_auction_status(_app(ctx))
    except ContractError as e:
        _fail(ctx, e)

    _echo_json(status)


@auction.command("bid-of")
@click.argument("contract_address")
@click.argument("bidder")
@click.pass_context
def auction_bid_of(ctx, contract_address, bidder):
    """Show BIDDER's recorded bid as JSON"""
    from openbid.core.errors import ContractError
    from openbid.host import AuctionContract

    try:
        bid = AuctionContract(contract_address).query_user_bid(_app(ctx), bidder)
    except ContractError as e:
        _fail(ctx, e)

    _echo_json(bid)


@auction.command("list")
@click.pass_context
def auction_list(ctx):
    """List all auctions"""
    app = _app(ctx)
    addresses = app.contracts()
    if not addresses:
        click.echo("No auctions found.")
        return

    for address in addresses:
        info = app.contract_info(address)
        click.echo(f"  {address}: {info.label or '-'} (creator {info.creator})")


# =============================================================================
# Demo Command
# =============================================================================


@cli.command("demo")
def demo():
    """Run an in-memory auction from creation to retraction"""
    from openbid.core.auction import BID_DENOM, InstantiateMsg
    from openbid.core.errors import ContractError
    from openbid.core.types import coins
    from openbid.host import App, AuctionContract

    click.echo("=" * 60)
    click.echo("  OPENBID - DEMO")
    click.echo("=" * 60)
    click.echo()

    app = App()
    for address, amount in (("owner", 100_000), ("alice", 150_000), ("bob", 200_000)):
        app.init_balance(address, coins(amount, BID_DENOM))

    click.echo("🏛️  owner opens the auction with 100000ubtc...")
    contract = AuctionContract.instantiate(
        app,
        "owner",
        InstantiateMsg(auction_item_title="Demo Auction"),
        coins(100_000, BID_DENOM),
        "demo",
    )
    click.echo(f"  ✓ Contract: {contract.address}")
    click.echo()

    click.echo("💸 alice bids 150000ubtc, bob bids 200000ubtc...")
    contract.bid(app, "alice", coins(150_000, BID_DENOM))
    contract.bid(app, "bob", coins(200_000, BID_DENOM))

    click.echo("🙅 alice tries to add 10000ubtc...")
    try:
        contract.bid(app, "alice", coins(10_000, BID_DENOM))
    except ContractError as e:
        click.echo(f"  ✓ Rejected: {e}")
    click.echo()

    click.echo("⚖️  owner closes bidding...")
    contract.close_bidding(app, "owner")
    status = contract.query_auction_status(app)
    click.echo(f"  ✓ Winner: {status.highest_bid.bidder} with {status.highest_bid.bid}")
    click.echo()

    click.echo("↩️  Losers retract their funds...")
    for address in ("owner", "alice"):
        contract.retract_funds(app, address)
        click.echo(f"  ✓ {address}: {app.query_balance(address, BID_DENOM)}")
    click.echo()

    click.echo("📊 Final Statistics:")
    click.echo(f"  Bidders recorded: {status.bidders_count}")
    click.echo(f"  Contract custody: {app.query_balance(contract.address, BID_DENOM)}")
    click.echo()
    click.echo("✅ Demo complete!")


if __name__ == "__main__":
    cli()
