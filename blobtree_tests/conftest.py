import os

from blobtree.conf import UNITTESTS_SETTINGS_FILEPATH

os.environ['BLOBTREE_CONFIG_YAML'] = os.environ.get('BLOBTREE_TEST_CONFIG_YAML', UNITTESTS_SETTINGS_FILEPATH)
