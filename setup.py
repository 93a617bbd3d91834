# -*- coding: utf-8 -*-
from setuptools import setup

package_dir = \
{'': 'python'}

packages = \
['docpatch',
 'docpatch.utils']

install_requires = \
['aiohttp', 'pyyaml', 'typing-extensions']

extras_require = \
{'test': ['pytest', 'pytest-asyncio']}

entry_points = \
{'console_scripts': ['docpatch = docpatch.main:main']}

setup_kwargs = {
    'name': 'docpatch',
    'version': '1.0.0',
    'description': 'RFC 6902 JSON Patch library with a command line tool and an HTTP document server',
    'long_description': "# docpatch\n\nApplies RFC 6902 JSON patches to JSON and YAML documents.\n\nThe library parses patches into immutable operations and applies them without modifying the original document. The `docpatch` command applies, validates and queries documents from the command line, and `docpatch serve` exposes a single document over an HTTP API that accepts `application/json-patch+json` requests.\n",
    'long_description_content_type': 'text/markdown',
    'package_dir': package_dir,
    'packages': packages,
    'install_requires': install_requires,
    'extras_require': extras_require,
    'entry_points': entry_points,
    'python_requires': '>=3.9,<4.0',
}

setup(**setup_kwargs)
