"""
divtoken.cli
------------

Operator tooling for the claim authorizer and the decay schedule.

Examples
--------
# New authorizer key (keep the private key secret)
divtoken keygen

# Sign a claim for an account, then check it
divtoken sign-claim --key 0x<priv> 0x<account>
divtoken verify-claim --authorizer 0x<addr> 0x<account> 0x<signature>

# Where on the decay curve is a payment made 50 days after the deadline?
divtoken era --deadline 1700000000 --at 1704320000 --amount 1000

# Effective configuration (env DIVTOKEN_*)
divtoken config
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Dict, NoReturn, Optional

import typer

from .config import config_from_env
from .context import to_address, to_hex
from .crypto.ecdsa import (SignatureError, address_of, generate_private_key,
                           recover_claim_signer, sign_claim)
from .dividends.scheduler import (FINAL_ERA, HALVING_PERIOD,
                                  effective_contribution, era_at)
from .errors import TokenError
from .math import MAGNITUDE, u256_mul_div
from .version import __version__

app = typer.Typer(
    name="divtoken",
    add_completion=False,
    no_args_is_help=True,
    help="Dividend token tooling: claim signatures, decay schedule, configuration.",
)

log = logging.getLogger("divtoken.cli")


# -------------------- utils --------------------

def _echo_json(obj: Dict[str, Any]) -> None:
    typer.echo(json.dumps(obj, indent=2, sort_keys=True))


def _fail(msg: str, code: int = 1) -> NoReturn:
    typer.echo(msg, err=True)
    raise typer.Exit(code)


def _parse_hex(value: str, what: str) -> bytes:
    v = value.strip()
    if v.startswith(("0x", "0X")):
        v = v[2:]
    try:
        return bytes.fromhex(v)
    except ValueError:
        _fail(f"{what} is not valid hex: {value!r}", 2)


def _address(value: str, what: str) -> bytes:
    try:
        return to_address(value)
    except TokenError as e:
        _fail(f"{what}: {e}", 2)


@app.callback()
def _main(
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Logging level (default: DIVTOKEN_LOG_LEVEL or WARNING)."
    ),
) -> None:
    level = (log_level or config_from_env().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


# -------------------- commands --------------------

@app.command()
def keygen(json_out: bool = typer.Option(False, "--json", help="Emit JSON.")) -> None:
    """Generate a secp256k1 key pair for the claim authorizer."""
    priv = generate_private_key()
    addr = address_of(priv)
    if json_out:
        _echo_json({"private_key": to_hex(priv), "address": to_hex(addr)})
        return
    typer.echo(f"private_key: {to_hex(priv)}")
    typer.echo(f"address:     {to_hex(addr)}")


@app.command()
def address(key: str = typer.Argument(..., help="0x-hex private key.")) -> None:
    """Print the address controlled by a private key."""
    try:
        typer.echo(to_hex(address_of(_parse_hex(key, "key"))))
    except SignatureError as e:
        _fail(f"bad key: {e}", 2)


@app.command("sign-claim")
def sign_claim_cmd(
    account: str = typer.Argument(..., help="Account allowed to claim (0x-hex address)."),
    key: str = typer.Option(..., "--key", "-k", help="Authorizer private key (0x-hex)."),
) -> None:
    """Produce the authorizer signature that lets ACCOUNT claim."""
    acct = _address(account, "account")
    try:
        sig = sign_claim(_parse_hex(key, "key"), acct)
    except SignatureError as e:
        _fail(f"bad key: {e}", 2)
    log.info("signed claim for %s", to_hex(acct))
    typer.echo(to_hex(sig))


@app.command("verify-claim")
def verify_claim_cmd(
    account: str = typer.Argument(..., help="Claiming account (0x-hex address)."),
    signature: str = typer.Argument(..., help="65-byte signature (0x-hex)."),
    authorizer: str = typer.Option(..., "--authorizer", "-a", help="Expected signer address."),
) -> None:
    """Check that SIGNATURE authorizes ACCOUNT; exit 1 otherwise."""
    acct = _address(account, "account")
    expected = _address(authorizer, "authorizer")
    try:
        signer = recover_claim_signer(acct, _parse_hex(signature, "signature"))
    except SignatureError as e:
        _fail(f"invalid signature: {e}")
    if signer != expected:
        _fail(f"signature is from {to_hex(signer)}, not {to_hex(expected)}")
    typer.echo("ok")


@app.command()
def era(
    deadline: int = typer.Option(..., "--deadline", min=0, help="Claim deadline (unix seconds)."),
    at: int = typer.Option(..., "--at", min=0, help="Payment time (unix seconds)."),
    amount: int = typer.Option(0, "--amount", min=0, help="Payment amount in base units."),
    supply: int = typer.Option(0, "--supply", min=0, help="Total supply, to show the accumulator increment."),
) -> None:
    """Show the decay era and effective contribution of a payment."""
    e = era_at(at, deadline)
    try:
        eff = effective_contribution(amount, e)
        increment = u256_mul_div(eff, MAGNITUDE, supply) if supply > 0 else None
    except TokenError as err:
        _fail(f"amount: {err}", 2)
    out: Dict[str, Any] = {
        "era": e,
        "final_era": FINAL_ERA,
        "halving_period": HALVING_PERIOD,
        "divisor": e + 1 if e < FINAL_ERA else None,
        "amount": amount,
        "effective": eff,
    }
    if increment is not None:
        out["increment"] = increment
    _echo_json(out)


@app.command()
def config() -> None:
    """Print the effective configuration (env DIVTOKEN_*) and version."""
    cfg = config_from_env()
    _echo_json({"config": cfg.as_dict(), "version": __version__})


def main() -> None:  # console_scripts entry point
    app()


if __name__ == "__main__":
    main()
