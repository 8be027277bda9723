import tempfile
import unittest
from pathlib import Path

from apps.tokenlist.entries import discover_folders, load_datadir, load_entry, load_folder

from apps.tokenlist.tests.fakes import write_entry

ADDRESS = '0x' + 'a' * 40

VALID = {
    'name': 'Foo',
    'symbol': 'FOO',
    'decimals': 18,
    'description': 'Foo token',
    'website': 'https://foo.example',
    'twitter': '@foo',
    'tokens': {
        'specular': {'address': ADDRESS, 'overrides': {'bridge': '0x' + 'b' * 40}},
        'sepolia': {'address': ADDRESS}
    }
}


class LoadEntryTests(unittest.TestCase):
    def test_valid_entry_is_typed(self) -> None:
        result = load_entry('FOO', VALID)

        self.assertTrue(result.ok)
        self.assertEqual(result.diagnostics, ())
        self.assertEqual(list(result.entry.tokens), ['specular', 'sepolia'])
        self.assertEqual(result.entry.tokens['specular'].overrides.bridge, '0x' + 'b' * 40)
        self.assertIsNone(result.entry.tokens['sepolia'].overrides.decimals)
        self.assertFalse(result.entry.nonstandard)

    def test_every_violation_is_reported(self) -> None:
        raw = {
            'symbol': 'FOO',
            'decimals': 'eighteen',
            'color': 'blue',
            'tokens': {'sepolia': {'address': '0x1234'}}
        }
        result = load_entry('FOO', raw)

        self.assertFalse(result.ok)
        messages = [item.message for item in result.diagnostics]
        self.assertTrue(all(item.kind == 'error' for item in result.diagnostics))
        self.assertTrue(all(message.startswith('FOO: instance') for message in messages))
        self.assertTrue(any("'name' is a required property" in message for message in messages))
        self.assertTrue(any('instance.decimals' in message for message in messages))
        self.assertTrue(any('color' in message for message in messages))
        self.assertTrue(any('instance.tokens.sepolia.address' in message for message in messages))
        self.assertGreaterEqual(len(messages), 4)

    def test_tokens_need_a_known_chain(self) -> None:
        result = load_entry('FOO', dict(VALID, tokens={}))
        self.assertFalse(result.ok)

        result = load_entry('FOO', dict(VALID, tokens={'moonchain': {'address': ADDRESS}}))
        self.assertFalse(result.ok)
        self.assertTrue(any('moonchain' in item.message for item in result.diagnostics))

    def test_unknown_override_field_is_rejected(self) -> None:
        raw = dict(VALID, tokens={'sepolia': {'address': ADDRESS, 'overrides': {'logo': 'x'}}})
        self.assertFalse(load_entry('FOO', raw).ok)

    def test_decimals_expected_mismatch_is_ignored_not_rejected(self) -> None:
        result = load_entry('FOO', VALID, {'symbol': 'FOO', 'decimals': 6})

        self.assertTrue(result.ok)
        self.assertEqual(result.expected_mismatches.symbol, 'FOO')
        self.assertFalse(hasattr(result.expected_mismatches, 'decimals'))

    def test_malformed_expected_mismatches_reject_entry(self) -> None:
        result = load_entry('FOO', VALID, {'symbol': 5})
        self.assertFalse(result.ok)
        self.assertIn('expectedMismatches.json', result.diagnostics[0].message)


class DataDirTests(unittest.TestCase):
    def test_folders_sort_case_insensitively_and_filter(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            for name in ('usdc', 'DAI', 'aave', 'WETH'):
                (root / name).mkdir()
            (root / 'README.md').write_text('docs', encoding='utf-8')

            self.assertEqual(discover_folders(root), ['aave', 'DAI', 'usdc', 'WETH'])
            self.assertEqual(discover_folders(root, ['WETH', 'aave']), ['aave', 'WETH'])

    def test_missing_data_file_is_an_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            (Path(tmp) / 'FOO').mkdir()
            result = load_folder(tmp, 'FOO')

        self.assertFalse(result.ok)
        self.assertIn('does not exist', result.diagnostics[0].message)

    def test_invalid_json_is_an_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            base = Path(tmp) / 'FOO'
            base.mkdir()
            (base / 'data.json').write_text('{not json', encoding='utf-8')
            result = load_folder(tmp, 'FOO')

        self.assertFalse(result.ok)
        self.assertIn('is not valid JSON', result.diagnostics[0].message)

    def test_undecodable_files_are_per_folder_errors(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            write_entry(root, 'GOOD', VALID)
            bad = root / 'BAD'
            bad.mkdir()
            (bad / 'data.json').write_bytes(b'{"name": "\xff"}')
            write_entry(root, 'UGLY', VALID)
            (root / 'UGLY' / 'expectedMismatches.json').write_bytes(b'{"symbol": "\xff"}')
            results = load_datadir(tmp)

        self.assertEqual([item.folder for item in results], ['BAD', 'GOOD', 'UGLY'])
        self.assertFalse(results[0].ok)
        self.assertEqual(len(results[0].diagnostics), 1)
        self.assertIn('is not valid JSON', results[0].diagnostics[0].message)
        self.assertTrue(results[1].ok)
        self.assertFalse(results[2].ok)
        self.assertIn('expectedMismatches.json is not valid JSON', results[2].diagnostics[0].message)

    def test_logo_count_is_checked_but_entry_still_loads(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            write_entry(Path(tmp), 'FOO', VALID, logos=('logo.png', 'logo.svg'))
            write_entry(Path(tmp), 'BAR', VALID, logos=())
            write_entry(Path(tmp), 'BAZ', VALID, expected_mismatches={'name': 'Foo'})
            results = load_datadir(tmp)

        self.assertEqual([item.folder for item in results], ['BAR', 'BAZ', 'FOO'])
        self.assertTrue(all(item.ok for item in results))
        self.assertIn('BAR has 0 logo files', results[0].diagnostics[0].message)
        self.assertEqual(results[1].diagnostics, ())
        self.assertEqual(results[1].expected_mismatches.name, 'Foo')
        self.assertIn('FOO has 2 logo files', results[2].diagnostics[0].message)


if __name__ == '__main__':
    unittest.main()
