import logging
import os
from dataclasses import dataclass


@dataclass(kw_only=True)
class Config(object):
    """
    Global solver settings. Class attributes are the defaults; a YAML file loaded with
    Config.load() overrides them, keys the class does not know go to the dynamic section.
    """
    MAX_LENGTH = 25  # default move-count ceiling for one solve
    MAX_LENGTH_LIMIT = 30  # hard ceiling, a larger request is rejected
    PHASE2_MAX_DEPTH = 10  # phase-2 cap in the default strategy
    TIMEOUT_SEC = None  # seconds for one solve, None: no limit
    DATA_FOLDER = os.getenv('CUBESOLVER_DATA', 'data')
    TABLE_FILE = 'twophase_tables.npz'
    LOG_LEVEL = 'WARNING'
    Version = 'v1.0.0'
    _config_path = 'config.yaml'
    __config_data = {}  # raw data of the loaded file
    __config_dynamic = {}  # keys that are not class attributes

    @staticmethod
    def norm_version(s):
        return s.lstrip('vV') if s else '0.0.0'

    @classmethod
    def table_path(cls, folder: str = None) -> str:
        return os.path.join(folder or cls.DATA_FOLDER, cls.TABLE_FILE)

    @classmethod
    def load(cls, filepath=None):
        """Load settings from a YAML file, class values are replaced by file values"""
        if cls.__config_data:  # is_loaded
            return cls.__config_dynamic

        import yaml
        path = filepath or getattr(cls, '_config_path', 'config.yaml')
        if not os.path.exists(path):
            logging.info(f"Config file {path} not found, using defaults")
            return {}

        with open(path, "r", encoding='utf-8') as f:
            cls.__config_data = yaml.safe_load(f) or {}

        load_version = cls.norm_version(cls.__config_data.get('Version'))
        cur_version = cls.norm_version(getattr(cls, 'Version'))
        for key, value in cls.__config_data.items():
            if key == 'Version':
                if load_version != cur_version:
                    logging.warning(f"Config file version {load_version} differs from {cur_version}")
                continue
            if hasattr(cls, key) and not key.startswith('_'):
                setattr(cls, key, value)
            else:
                cls.__config_dynamic[key] = value

        cls.__config_dynamic['IS_LOADED'] = True
        logging.info(f"Config loaded from {path}")
        return cls.__config_dynamic

    @classmethod
    def reset(cls):
        """Forget the loaded file so that load() reads again"""
        cls.__config_data = {}
        cls.__config_dynamic = {}

    @classmethod
    def get(cls, key, default=None):
        """
        Lookup order:
        1. class attribute
        2. dynamic key from the loaded file
        """
        if hasattr(cls, key):
            return getattr(cls, key, default)
        return cls.__config_dynamic.get(key, default)

    @classmethod
    def update(cls, **kwargs):
        for key, value in kwargs.items():
            if hasattr(cls, key):
                setattr(cls, key, value)
            else:
                cls.__config_dynamic[key] = value

    @classmethod
    def get_config_data(cls):
        config_data = {f"{key}": value for key, value in cls.__dict__.items()
                       if not key.startswith('_') and key.isupper()
                       and not callable(value)
                       and not isinstance(value, (classmethod, staticmethod))}
        config_data.update(cls.__config_dynamic)
        return config_data


def setup_logging(level=None):
    level = level or Config.LOG_LEVEL
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(format="%(asctime)s - %(levelname)s - %(message)s", level=level, encoding='utf-8',
                        handlers=[logging.StreamHandler()])
