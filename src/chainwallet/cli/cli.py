# src/chainwallet/cli/cli.py
import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from ..blockchain.block import Block
from ..blockchain.transaction import SignedTransaction
from ..exceptions import ChainWalletError, ErrorKind
from ..network.client import LedgerClient
from ..utils.config import Config, WalletConfig
from ..utils.logger import configure_logging
from ..wallet.store import WalletFile
from ..wallet.wallet import WalletClient

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130
EXIT_CODES = {
    ErrorKind.KEY_GENERATION: 10,
    ErrorKind.INVALID_KEY_ENCODING: 11,
    ErrorKind.STORE_CORRUPT: 12,
    ErrorKind.STORE_WRITE: 13,
    ErrorKind.DUPLICATE_WALLET: 14,
    ErrorKind.WALLET_NOT_FOUND: 15,
    ErrorKind.INVALID_AMOUNT: 16,
    ErrorKind.INVALID_ADDRESS: 17,
    ErrorKind.INVALID_WALLET_NAME: 18,
    ErrorKind.INVALID_BLOCK_INDEX: 19,
    ErrorKind.NETWORK: 20,
    ErrorKind.REMOTE_REJECTED: 21,
    ErrorKind.CONFIG: 30,
}
ERROR_PREFIXES = {
    "new": "Error creating wallet",
    "balance": "Error getting balance",
    "send": "Error sending transaction",
    "faucet": "Error requesting from faucet",
    "history": "Error getting history",
    "state": "Error getting state",
    "block": "Error getting block",
}


def exit_code_for(error: ChainWalletError) -> int:
    return EXIT_CODES.get(error.kind, 1)


def format_timestamp(timestamp: int) -> str:
    try:
        return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
    except (OverflowError, OSError, ValueError):
        return "Invalid Timestamp"


def format_transaction(tx: SignedTransaction) -> str:
    return (
        f"Time: {format_timestamp(tx.timestamp)}, From: {tx.sender}, To: {tx.recipient}, "
        f"Amount: {tx.amount}, Sig: {tx.signature[:8].hex()}..."
    )


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value}")
    return number


def block_index(value: str) -> int:
    number = non_negative_int(value)
    if number > Config.MAX_AMOUNT:
        raise argparse.ArgumentTypeError(f"must not exceed {Config.MAX_AMOUNT}: {value}")
    return number


class CLI:
    def __init__(self, stdout=None, stderr=None):
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr
        self.wallet: Optional[WalletClient] = None

    def main(self, argv: List[str]) -> int:
        parser = self.create_parser()
        args = parser.parse_args(argv)

        if not hasattr(args, 'func'):
            parser.print_help(self.stderr)
            return EXIT_USAGE

        try:
            config = self.load_config(args)
            configure_logging(self._log_level(config, args.verbose), config.log_file)
            ledger = LedgerClient(config.endpoint, config.timeout)
            with ledger:
                self.wallet = WalletClient(WalletFile(config.wallet_dir), ledger)
                args.func(args)
        except ChainWalletError as e:
            prefix = ERROR_PREFIXES.get(args.command, "Error")
            self.error(f"{prefix}: {e}")
            logger.debug("Command failed", exc_info=True)
            return exit_code_for(e)
        except KeyboardInterrupt:
            self.error("Interrupted")
            return EXIT_INTERRUPTED
        return EXIT_OK

    def create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog='chainwallet',
            description='Command-line wallet for a gRPC ledger service'
        )
        parser.add_argument('--config', help='Path to a YAML configuration file')
        parser.add_argument('--endpoint', help='Ledger service address (host:port)')
        parser.add_argument('--wallet-dir', help='Directory holding wallets.json')
        parser.add_argument('--timeout', type=float, help='RPC timeout in seconds')
        parser.add_argument('-v', '--verbose', action='count', default=0,
                            help='Increase log output (-v info, -vv debug)')
        subparsers = parser.add_subparsers(title='commands', dest='command')

        new_wallet = subparsers.add_parser('new', help='Create a new wallet')
        new_wallet.add_argument('name', help='Name to assign to the new wallet')
        new_wallet.set_defaults(func=self.create_wallet)

        list_wallets = subparsers.add_parser('list', help='List local wallets')
        list_wallets.set_defaults(func=self.list_wallets)

        balance = subparsers.add_parser('balance', help='Get wallet balance')
        balance.add_argument('wallet', help='Wallet name or address')
        balance.set_defaults(func=self.get_balance)

        send = subparsers.add_parser('send', help='Send coins to another wallet')
        send.add_argument('sender', metavar='from', help="Name of the sender's wallet")
        send.add_argument('recipient', metavar='to', help='Name or address of the recipient')
        send.add_argument('amount', type=non_negative_int, help='Amount of coins to send')
        send.set_defaults(func=self.send_transaction)

        faucet = subparsers.add_parser('faucet', help='Request coins from the faucet')
        faucet.add_argument('wallet', help='Name of the wallet to receive funds')
        faucet.set_defaults(func=self.request_faucet)

        history = subparsers.add_parser('history', help='Show transaction history')
        history.add_argument('wallet', help='Wallet name or address')
        history.set_defaults(func=self.get_history)

        state = subparsers.add_parser('state', help='Show every block of the ledger')
        state.set_defaults(func=self.get_state)

        block = subparsers.add_parser('block', help='Show a block by index')
        block.add_argument('index', type=block_index, help='Index of the block')
        block.set_defaults(func=self.get_block)

        return parser

    def load_config(self, args) -> WalletConfig:
        config_path = args.config
        if config_path is None and args.wallet_dir:
            config_path = Path(args.wallet_dir) / Config.CONFIG_FILE
        config = WalletConfig(config_path)
        if args.endpoint:
            config.update("network.endpoint", args.endpoint)
        if args.wallet_dir:
            config.update("storage.wallet_dir", args.wallet_dir)
        if args.timeout is not None:
            config.update("network.timeout", args.timeout)
        return config

    @staticmethod
    def _log_level(config: WalletConfig, verbose: int) -> str:
        if verbose >= 2:
            return "DEBUG"
        if verbose == 1:
            return "INFO"
        return config.log_level

    def out(self, message: str = ""):
        print(message, file=self.stdout)

    def error(self, message: str):
        print(message, file=self.stderr)

    def create_wallet(self, args):
        record = self.wallet.create_wallet(args.name)
        self.out(f"New wallet '{record.name}' created!")
        self.out(f"Address: {record.address}")

    def list_wallets(self, args):
        wallets = self.wallet.list_wallets()
        if not wallets:
            self.out("No wallets found. Create one with 'chainwallet new <NAME>'")
            return
        self.out("Your wallets:")
        for record in wallets:
            self.out(f"- {record.name}: {record.address}")

    def get_balance(self, args):
        balance = self.wallet.get_balance(args.wallet)
        self.out(f"Balance for '{args.wallet}': {balance} coins")

    def send_transaction(self, args):
        signed_tx = self.wallet.send_transaction(args.sender, args.recipient, args.amount)
        self.out("Transaction sent successfully!")
        self.out(f"Signature: {signed_tx.signature.hex()}")

    def request_faucet(self, args):
        amount = self.wallet.request_faucet(args.wallet)
        self.out(f"Received {amount} coins to wallet '{args.wallet}'")

    def get_history(self, args):
        transactions = self.wallet.get_history(args.wallet)
        if not transactions:
            self.out(f"No transaction history found for '{args.wallet}'.")
            return
        self.out(f"Transaction History for '{args.wallet}':")
        for tx in transactions:
            self.out(f"- {format_transaction(tx)}")

    def print_block_header(self, block: Block):
        self.out(f"--- Block {block.index} ---")
        self.out(f"  Hash: {block.hash}")
        self.out(f"  Prev Hash: {block.previous_hash}")
        self.out(f"  Timestamp: {format_timestamp(block.timestamp)}")
        self.out(f"  Nonce: {block.nonce}")
        self.out(f"  Miner: {block.miner}")
        self.out(f"  Transactions ({block.transaction_count}):")

    def get_state(self, args):
        blocks = self.wallet.get_state()
        self.out(f"Current Blockchain State ({len(blocks)} blocks):")
        for block in blocks:
            self.print_block_header(block)
            self.out("---------------")

    def get_block(self, args):
        block = self.wallet.get_block(args.index)
        if block is None:
            self.out(f"Block with index {args.index} not found.")
            return
        self.print_block_header(block)
        for tx in block.transactions:
            self.out(f"    - {format_transaction(tx)}")
        self.out("---------------")


def main(argv: Optional[List[str]] = None) -> int:
    cli = CLI()
    return cli.main(sys.argv[1:] if argv is None else argv)


if __name__ == "__main__":
    sys.exit(main())
