import tempfile
import unittest
import urllib.error
from pathlib import Path

from apps.tokenlist.chain_registry import ChainId
from apps.tokenlist.external_list import ExternalTokenList
from apps.tokenlist.validate import validate

from apps.tokenlist.tests.fakes import FakeReader, make_registry, make_settings, write_entry

ADDRESS = '0x' + 'a' * 40


def _entry(chain: str, **fields) -> dict:
    data = {'name': 'Foo', 'symbol': 'FOO', 'decimals': 18, 'tokens': {chain: {'address': ADDRESS}}}
    data.update(fields)
    return data


def _unreachable() -> ExternalTokenList:
    raise urllib.error.URLError('offline')


class ValidateTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.datadir = Path(self._tmp.name)
        self.settings = make_settings(max_workers=4)
        self.readers = {
            ChainId.SEPOLIA: FakeReader(fields={'name': 'Foo', 'symbol': 'FOO', 'decimals': 6}),
            ChainId.ETHEREUM: FakeReader(fields={'name': 'Foo', 'symbol': 'FOO', 'decimals': 18})
        }
        self.registry = make_registry(self.readers, self.settings)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _run(self, fetch_list, tokens=None, generate=None) -> list:
        return validate(
            self.datadir,
            tokens,
            settings=self.settings,
            registry=self.registry,
            fetch_list=fetch_list,
            generate=generate
        )

    def test_report_is_grouped_in_folder_order(self) -> None:
        write_entry(self.datadir, 'zed', _entry('sepolia'))
        write_entry(self.datadir, 'Alpha', _entry('sepolia'))
        write_entry(self.datadir, 'beta', {'name': 'Beta', 'tokens': {'sepolia': {'address': ADDRESS}}})

        result = self._run(lambda: ExternalTokenList.from_tokens([{'address': ADDRESS}]))
        messages = [item.message for item in result]

        self.assertTrue(messages[0].startswith('Alpha on chain sepolia'))
        self.assertTrue(all(message.startswith('beta: instance') for message in messages[1:3]))
        self.assertTrue(messages[3].startswith('zed on chain sepolia'))
        # The invalid entry never reaches the chain.
        self.assertFalse(any('beta on chain' in message for message in messages))
        self.assertTrue(messages[-1].startswith('final token list is invalid'))

    def test_external_list_failure_warns_once_first(self) -> None:
        write_entry(self.datadir, 'DAI', _entry('ethereum'))
        write_entry(self.datadir, 'USDC', _entry('ethereum'))

        result = self._run(_unreachable)

        self.assertEqual(result[0].kind, 'warning')
        self.assertIn('CoinGecko token list failed', result[0].message)
        self.assertEqual(sum('CoinGecko' in item.message for item in result), 1)
        self.assertEqual(len(result), 1)

    def test_unlisted_privileged_chain_token_warns(self) -> None:
        write_entry(self.datadir, 'DAI', _entry('ethereum'))

        result = self._run(lambda: ExternalTokenList.from_tokens([]))

        self.assertEqual([item.kind for item in result], ['warning'])
        self.assertIn('not found on CoinGecko token list', result[0].message)

    def test_native_asset_is_never_checked_on_chain(self) -> None:
        write_entry(self.datadir, 'ETH', _entry('sepolia', decimals=1, symbol='WRONG'))

        result = self._run(lambda: ExternalTokenList.from_tokens([]))

        self.assertEqual(result, [])
        self.assertEqual(self.readers[ChainId.SEPOLIA].calls, [])

    def test_token_filter_limits_chain_checks(self) -> None:
        write_entry(self.datadir, 'FOO', _entry('sepolia'))
        write_entry(self.datadir, 'BAR', _entry('sepolia'))

        result = self._run(lambda: ExternalTokenList.from_tokens([]), tokens=['BAR'])

        self.assertEqual([item.message for item in result], [f'BAR on chain sepolia token {ADDRESS} has incorrect decimals'])

    def test_injected_generator_output_is_validated(self) -> None:
        write_entry(self.datadir, 'ETH', _entry('sepolia'))

        result = self._run(lambda: ExternalTokenList.from_tokens([]), generate=lambda datadir: {'tokens': []})

        self.assertEqual(len(result), 1)
        self.assertIn("'name' is a required property", result[0].message)


if __name__ == '__main__':
    unittest.main()
