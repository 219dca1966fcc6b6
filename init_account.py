"""
Seed a demo checking account with an opening deposit and withdrawal caps,
then print a bearer token for calling the API as that user.
"""
import argparse
import asyncio
from decimal import Decimal

from checking_accounts.core.config import get_settings
from checking_accounts.core.logging import configure_logging
from checking_accounts.core.security import AuthGate
from checking_accounts.domain.accounts import AccountService
from checking_accounts.domain.limits import LimitService
from checking_accounts.infrastructure.database import get_session, init_db


async def create_demo_account(user_id: str, currency_id: str, deposit: Decimal, daily: Decimal, monthly: Decimal):
    settings = get_settings()
    configure_logging(settings)
    await init_db()

    async for db in get_session():
        accounts = AccountService.with_session(db)
        account = await accounts.open_account(user_id, currency_id)
        if deposit > 0:
            await accounts.deposit(user_id, currency_id, deposit, "Opening deposit")
        await LimitService.with_session(db).set_limits(user_id, currency_id, daily, monthly)
        account = await accounts.get_account(user_id, currency_id)
        print(f"Account {account.id} for {user_id}: balance {account.balance} {currency_id}")

    token = AuthGate(settings.security).issue(user_id)
    print(f"Bearer token: {token}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed a demo checking account")
    parser.add_argument("--user", default="demo-user")
    parser.add_argument("--currency", default="USD")
    parser.add_argument("--deposit", type=Decimal, default=Decimal("1000.00"))
    parser.add_argument("--daily-limit", type=Decimal, default=Decimal("500.00"))
    parser.add_argument("--monthly-limit", type=Decimal, default=Decimal("2000.00"))
    args = parser.parse_args()
    asyncio.run(create_demo_account(args.user, args.currency, args.deposit, args.daily_limit, args.monthly_limit))


if __name__ == "__main__":
    main()
