"""
Built-in fixtures.

YAML files in this directory declare the packaged batches; importing this
package registers the Python batches on the default registry.
"""

from . import documentation  # noqa: F401
