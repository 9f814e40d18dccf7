__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

from typing import Any, Dict, Hashable, TextIO, Union

import yaml

try:
    from yaml import CSafeDumper as SafeDumper
    from yaml import CSafeLoader as SafeLoader
except ImportError:
    from yaml import SafeDumper, SafeLoader


def load_from_file(
    file: TextIO = None, path: str = None
) -> Union[Dict[Hashable, Any], list, None]:
    """
    Safely loads yaml data from the given source. Either a path or a file must be passed in.
    """
    assert path is not None or file is not None, "this function requires an input file"

    if path is not None:
        assert file is None
        with open(path, encoding="utf-8-sig") as f:
            return yaml.load(f, Loader=SafeLoader)

    return yaml.load(file, Loader=SafeLoader)


def save_to_file(data, file=None, path=None, pretty=False, **kwargs):
    """
    Safely dumps ``data`` to yaml, either into the open ``file`` or to ``path``.

    :param pretty: formats the output yaml into a more human-friendly format
    """
    assert file is not None or path is not None, "this function requires an output file"

    if path is not None:
        assert file is None
        with open(path, "wt", encoding="utf-8") as f:
            return save_to_file(data, file=f, pretty=pretty, **kwargs)

    return dump(data, stream=file, pretty=pretty, **kwargs)


def dump(data, pretty=False, **kwargs):
    """
    Safely dumps ``data`` to a yaml string (or to ``stream`` if provided via kwargs).
    """
    if pretty:
        kwargs.update(default_flow_style=False, indent=2)

    return yaml.dump(data, Dumper=SafeDumper, allow_unicode=True, **kwargs)
