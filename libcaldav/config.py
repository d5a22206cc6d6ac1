import json
import logging
import os
from fnmatch import fnmatch
from typing import Any
from typing import Dict
from typing import List
from typing import Mapping
from typing import Optional
from typing import Set

from libcaldav.lib.python_utilities import as_bool
from libcaldav.protocol.types import DebugOptions
from libcaldav.protocol.types import RuntimeInfo

"""
Runtime options for libcaldav may come from keyword arguments, from
environment variables prepended with ``CALDAV_`` (``CALDAV_DEBUG``,
``CALDAV_USE_LOCKING``, ...) or from a section of a configuration
file, where the keys are prepended with ``caldav_`` (``caldav_debug``,
``caldav_use_locking``, ...).  The configuration file is JSON or, if
pyyaml is installed, YAML.
"""

OPTION_KEYS = (
    "trace_ascii",
    "debug",
    "verify_ssl_certificate",
    "use_locking",
    "custom_cacert",
    "timeout",
)

BOOLEAN_OPTIONS = ("trace_ascii", "debug", "verify_ssl_certificate", "use_locking")

GLOB_CHARS = set("[*?")


def _config_candidates() -> List[str]:
    home = os.environ.get("HOME", "/")
    return [
        f"{home}/.config/libcaldav/calendar.conf",
        f"{home}/.config/libcaldav/calendar.yaml",
        f"{home}/.config/libcaldav/calendar.json",
        f"{home}/.config/calendar.conf",
        "/etc/calendar.conf",
        "/etc/libcaldav/calendar.conf",
    ]


def expand_config_section(config, section="default", blacklist: Optional[Set[str]] = None):
    """
    The names of the sections ``section`` stands for.  Usually that is
    just ``[section]``, but it may also be:

    * ``*``, every section that is not disabled
    * a glob pattern, ``work_*``
    * a "meta" section with a ``contains`` list of other section names,
      possibly meta sections or glob patterns themselves

    Sections with ``disable`` set are left out, unknown section names
    are logged and left out.
    """
    if section == "*":
        return [name for name in config if not config[name].get("disable", False)]

    if not GLOB_CHARS.isdisjoint(section):
        found = set()
        for name in config:
            if not fnmatch(name, section):
                continue
            if GLOB_CHARS.isdisjoint(name):
                found.update(expand_config_section(config, name))
            else:
                ## don't recurse on section names looking like patterns
                found.add(name)
        return found

    if section not in config:
        logging.warning(f"no section {section} in the config file, ignoring it")
        return []

    members = config[section].get("contains")
    if members is None:
        return [] if config[section].get("disable", False) else [section]

    ## meta section; the blacklist breaks reference loops
    blacklist = (blacklist or set()) | {section}
    results: List[str] = []
    for member in members:
        if member in blacklist:
            continue
        for name in expand_config_section(config, member, blacklist):
            if name not in results:
                results.append(name)
    return results


def config_section(config, section="default") -> Dict[str, Any]:
    """A section of the config, with whatever it ``inherits`` filled in"""
    if section not in config:
        return {}
    ret = {}
    parent = config[section].get("inherits")
    if parent:
        ret.update(config_section(config, parent))
    ret.update(config[section])
    return ret


def _load(fn: str):
    with open(fn, "rb") as config_file:
        raw = config_file.read()
    try:
        return json.loads(raw)
    except json.decoder.JSONDecodeError:
        pass
    ## pyyaml is an optional extra, only needed for YAML configuration
    try:
        import yaml
    except ImportError:
        logging.error(
            f"config file {fn} exists but is not valid json, and pyyaml is not installed."
        )
        return None
    try:
        return yaml.load(raw, yaml.SafeLoader)
    except yaml.YAMLError:
        logging.error(
            f"config file {fn} exists but is neither valid json nor yaml.  Check the syntax."
        )
        return None


def read_config(fn: Optional[str]):
    """
    Read the configuration file fn.  Without fn, the usual places are
    searched and the first file found is read.  A broken or missing
    file gives an empty config.
    """
    if not fn:
        for candidate in _config_candidates():
            cfg = read_config(candidate)
            if cfg:
                return cfg
        return None

    try:
        return _load(fn) or {}
    except FileNotFoundError:
        logging.info(f"no config file found at {fn}")
    except ValueError:
        logging.error(f"error in config file {fn}.  It will be ignored", exc_info=True)
    return {}


def _coerce(key: str, value: Any) -> Any:
    if key in BOOLEAN_OPTIONS:
        return as_bool(value)
    if key == "timeout":
        return float(value) if value not in (None, "") else None
    return value or None


def _collect(values: Mapping[str, Any], prefix: str) -> Dict[str, Any]:
    options = {}
    for key in OPTION_KEYS:
        if prefix + key not in values:
            continue
        value = values[prefix + key]
        try:
            options[key] = _coerce(key, value)
        except (TypeError, ValueError):
            logging.warning(f"ignoring {prefix}{key}={value!r}, not a valid value")
    return options


def options_from_environment(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Runtime options found in CALDAV_* environment variables"""
    if environ is None:
        environ = os.environ
    found = {k.lower(): v for k, v in environ.items() if k.startswith("CALDAV_")}
    return _collect(found, "caldav_")


def options_from_section(section: Mapping[str, Any]) -> Dict[str, Any]:
    """Runtime options found in caldav_* keys of a config file section"""
    return _collect(section, "caldav_")


def get_runtime_info(
    check_config_file: bool = True,
    config_file: Optional[str] = None,
    config_section_name: Optional[str] = None,
    environment: bool = True,
    **options,
) -> RuntimeInfo:
    """
    This function will yield an initialized RuntimeInfo.  Options are
    looked up in this order, the first hit wins:

    * Keyword arguments given (``debug=True``, ``use_locking=True``, ...)
    * Environment variables prepended with `CALDAV_`, like `CALDAV_DEBUG`
    * The ``caldav_*`` keys of a section in the configuration file.  The
      file and section can be given, or through the `CALDAV_CONFIG_FILE`
      and `CALDAV_CONFIG_SECTION` environment variables.  The section
      may be a meta section or a glob pattern (see
      expand_config_section); the sections it stands for are merged,
      the last one winning.

    Values that can't be interpreted are logged and ignored.
    """
    unknown = set(options) - set(OPTION_KEYS)
    if unknown:
        raise TypeError("unknown runtime options: %s" % ", ".join(sorted(unknown)))

    found: Dict[str, Any] = {}
    if environment:
        if not config_file:
            config_file = os.environ.get("CALDAV_CONFIG_FILE")
        if not config_section_name:
            config_section_name = os.environ.get("CALDAV_CONFIG_SECTION")

    if check_config_file:
        cfg = read_config(config_file)
        if cfg:
            sections = expand_config_section(cfg, config_section_name or "default")
            if isinstance(sections, set):
                sections = sorted(sections)
            for name in sections:
                found.update(options_from_section(config_section(cfg, name)))

    if environment:
        found.update(options_from_environment())

    found.update(options)
    return RuntimeInfo(options=DebugOptions(**found))
