# test_settings.py
import os
import tempfile
import unittest
from unittest.mock import patch

from scanrelay.core.decoder import UnmappedPolicy, OverflowPolicy
from scanrelay.core.errors import ConfigError, MissingConfigurationError
from scanrelay.settings import Settings, load_config, ENV_DEVICE_PATH, ENV_SERVER_ADDRESS


CONFIG_YAML = """
scanner:
  device_path: /dev/input/event5
http:
  server_address: http://example.com/scan
  timeout: 3
decoder:
  max_length: 32
  unmapped_policy: invalidate
  overflow_policy: reject
logging:
  level: debug
  file: /tmp/scanrelay.log
"""


class TestLoadConfig(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)

    def write(self, name, text):
        path = os.path.join(self.tmpdir.name, name)
        with open(path, 'w') as f:
            f.write(text)
        return path

    def test_explicit_file(self):
        path = self.write('settings.yaml', CONFIG_YAML)
        with self.assertLogs('scanrelay.settings', level='INFO') as logs:
            config = load_config(path)
        self.assertIn('Loaded config from', logs.output[0])
        self.assertEqual(config['scanner']['device_path'], '/dev/input/event5')

    def test_explicit_file_missing(self):
        with self.assertRaises(ConfigError):
            load_config(os.path.join(self.tmpdir.name, 'nope.yaml'))

    def test_invalid_yaml(self):
        path = self.write('bad.yaml', 'scanner: [unclosed\n')
        with self.assertRaises(ConfigError):
            load_config(path)

    def test_not_a_mapping(self):
        path = self.write('list.yaml', '- a\n- b\n')
        with self.assertRaises(ConfigError):
            load_config(path)

    def test_empty_file(self):
        path = self.write('empty.yaml', '')
        self.assertEqual(load_config(path), {})

    def test_no_file_found(self):
        with patch('scanrelay.settings.CONFIG_PATHS',
                   [os.path.join(self.tmpdir.name, 'settings.yaml')]):
            self.assertEqual(load_config(), {})

    def test_search_paths(self):
        path = self.write('settings.yaml', CONFIG_YAML)
        from pathlib import Path
        with patch('scanrelay.settings.CONFIG_PATHS',
                   [Path(self.tmpdir.name) / 'missing.yaml', Path(path)]):
            config = load_config()
        self.assertEqual(config['http']['server_address'], 'http://example.com/scan')


class TestSettings(unittest.TestCase):

    def test_defaults(self):
        settings = Settings.from_config({}, environ={})
        self.assertIsNone(settings.device_path)
        self.assertIsNone(settings.server_address)
        self.assertEqual(settings.max_length, 64)
        self.assertEqual(settings.unmapped_policy, UnmappedPolicy.DROP)
        self.assertEqual(settings.overflow_policy, OverflowPolicy.INVALIDATE)
        self.assertEqual(settings.http_timeout, 5.0)
        self.assertEqual(settings.log_level, 'INFO')
        self.assertIsNone(settings.log_file)

    def test_from_file_values(self):
        import yaml
        settings = Settings.from_config(yaml.safe_load(CONFIG_YAML), environ={})
        self.assertEqual(settings.device_path, '/dev/input/event5')
        self.assertEqual(settings.server_address, 'http://example.com/scan')
        self.assertEqual(settings.http_timeout, 3.0)
        self.assertEqual(settings.max_length, 32)
        self.assertEqual(settings.unmapped_policy, UnmappedPolicy.INVALIDATE)
        self.assertEqual(settings.overflow_policy, OverflowPolicy.REJECT)
        self.assertEqual(settings.log_level, 'DEBUG')
        self.assertEqual(settings.log_file, '/tmp/scanrelay.log')

    def test_environment_overrides_file(self):
        config = {'scanner': {'device_path': '/dev/input/event5'},
                  'http': {'server_address': 'http://file/scan'}}
        environ = {ENV_DEVICE_PATH: '/dev/input/event9',
                   ENV_SERVER_ADDRESS: 'http://env/scan'}
        settings = Settings.from_config(config, environ=environ)
        self.assertEqual(settings.device_path, '/dev/input/event9')
        self.assertEqual(settings.server_address, 'http://env/scan')

    def test_invalid_policy(self):
        with self.assertRaises(ConfigError):
            Settings.from_config({'decoder': {'unmapped_policy': 'ignore'}}, environ={})

    def test_section_not_a_mapping(self):
        """A scalar where a section belongs is a config error"""
        for name in ('scanner', 'http', 'decoder', 'logging'):
            with self.subTest(section=name):
                with self.assertRaises(ConfigError) as ctx:
                    Settings.from_config({name: '/dev/input/event3'}, environ={})
                self.assertIn(f"'{name}' must be a mapping", str(ctx.exception))

    def test_empty_section(self):
        settings = Settings.from_config({'scanner': None}, environ={})
        self.assertIsNone(settings.device_path)

    def test_invalid_number(self):
        with self.assertRaises(ConfigError):
            Settings.from_config({'http': {'timeout': 'soon'}}, environ={})

    def test_validate_missing_both(self):
        with self.assertRaises(MissingConfigurationError) as ctx:
            Settings().validate()
        self.assertEqual(len(ctx.exception.missing), 2)
        self.assertIn(ENV_DEVICE_PATH, str(ctx.exception))
        self.assertIn(ENV_SERVER_ADDRESS, str(ctx.exception))

    def test_validate_missing_server(self):
        with self.assertRaises(MissingConfigurationError) as ctx:
            Settings(device_path='/dev/input/event0').validate()
        self.assertEqual(ctx.exception.missing, ['http.server_address (HTTP_SERVER_ADDRESS)'])

    def test_validate_ranges(self):
        base = dict(device_path='/dev/input/event0', server_address='http://x/scan')
        Settings(**base).validate()
        with self.assertRaises(ConfigError):
            Settings(max_length=0, **base).validate()
        with self.assertRaises(ConfigError):
            Settings(http_timeout=0, **base).validate()

    def test_validate_non_finite_timeout(self):
        base = dict(device_path='/dev/input/event0', server_address='http://x/scan')
        for value in (float('nan'), float('inf')):
            with self.subTest(timeout=value):
                with self.assertRaises(ConfigError):
                    Settings(http_timeout=value, **base).validate()

    def test_nan_timeout_from_yaml(self):
        import yaml
        config = yaml.safe_load('http:\n  timeout: .nan\n')
        settings = Settings.from_config(config, environ={})
        settings.device_path = '/dev/input/event0'
        settings.server_address = 'http://x/scan'
        with self.assertRaises(ConfigError):
            settings.validate()


if __name__ == '__main__':
    unittest.main(verbosity=2)
