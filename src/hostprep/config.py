"""Configuration loader for hostprep.

Configuration values are read from multiple sources, later sources winning:

1. Built-in defaults (the Amazon Linux 2 / Malcolm demo data tables).
2. ``$XDG_CONFIG_HOME/hostprep/config.yml`` (or the path named by
   ``HOSTPREP_CONFIG_FILE``). A missing file is not an error.
3. Environment variables prefixed with ``HOSTPREP_``.
4. Explicit overrides supplied programmatically.

Environment keys use double underscores to express nesting, e.g.::

    export HOSTPREP_DOCKER__COMPOSE_VERSION=1.29.2
    export HOSTPREP_ASDF__TOOLS="[jq, yq]"

Values are coerced via PyYAML's ``safe_load`` so that booleans, numbers and
flow sequences are parsed naturally. Ambient process state (home directory,
XDG paths, effective user) is captured here once and exposed through the
immutable ``AppConfig`` that every action receives.
"""
from __future__ import annotations

import getpass
import os
from collections.abc import Mapping, MutableMapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import cast

import yaml
from packaging.version import InvalidVersion, Version

ENV_PREFIX = "HOSTPREP_"
CONFIG_ENV_VAR = f"{ENV_PREFIX}CONFIG_FILE"
RESERVED_ENV_KEYS = {CONFIG_ENV_VAR}


class ConfigError(RuntimeError):
    """Raised when configuration parsing fails."""


@dataclass(frozen=True)
class GuardConfig:
    """Host checks that must pass before any action runs."""

    os_marker: str = "amazon-linux-extras"
    required_tools: tuple[str, ...] = ("yum",)


@dataclass(frozen=True)
class AsdfConfig:
    """Location and tool list for the asdf version manager."""

    dir: Path
    repo: str = "https://github.com/asdf-vm/asdf.git"
    tools: tuple[str, ...] = ()

    @property
    def bin_dir(self) -> Path:
        """Directory holding the ``asdf`` executable."""
        return self.dir / "bin"

    @property
    def shims_dir(self) -> Path:
        """Directory holding tool shims."""
        return self.dir / "shims"


@dataclass(frozen=True)
class PackagesConfig:
    """Package lists for yum, amazon-linux-extras and pip."""

    essential: tuple[str, ...] = ()
    extras: tuple[str, ...] = ()
    yum: tuple[str, ...] = ()
    pip: tuple[str, ...] = ()
    python_links: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class DockerConfig:
    """Docker Compose release details."""

    compose_version: str = "1.29.2"
    compose_path: Path = Path("/usr/local/bin/docker-compose")
    compose_url: str = (
        "https://github.com/docker/compose/releases/download/"
        "{version}/docker-compose-{system}-{machine}"
    )


@dataclass(frozen=True)
class SystemConfig:
    """Kernel and OS tuning tables."""

    sysctl_file: Path
    sysctl_marker: str
    sysctl_settings: tuple[tuple[str, str, str], ...]
    limits_file: Path
    limits: tuple[str, ...]
    grub_file: Path
    grub_marker: str
    grub_args: tuple[str, ...]
    grub_cfg: Path


@dataclass(frozen=True)
class BinaryRelease:
    """One user-local binary fetched from a release archive."""

    name: str
    url: str
    repo: str | None = None
    archive: str = "tar"
    strip_v: bool = False
    strip_components: int = 0
    members: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class DotfilesConfig:
    """Dotfiles repository and the links created from it."""

    repo: str
    dest: Path
    links: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class MalcolmConfig:
    """Malcolm checkout, compose overrides and demo artifacts."""

    repo: str
    path: Path
    artifacts: Path
    install_args: tuple[str, ...] = ()
    compose_file: str = "docker-compose.yml"
    compose_overrides: tuple[tuple[str, str], ...] = ()
    helper_scripts: tuple[str, ...] = ()
    samples: tuple[str, ...] = ()
    copy_samples: tuple[str, ...] = ()


@dataclass(frozen=True)
class AppConfig:
    """Resolved configuration values for hostprep."""

    config_file: Path
    user: str
    is_root: bool
    home: Path
    local_bin: Path
    local_data: Path
    local_config: Path
    logs_dir: Path
    guard: GuardConfig
    asdf: AsdfConfig
    packages: PackagesConfig
    docker: DockerConfig
    system: SystemConfig
    binaries: tuple[BinaryRelease, ...]
    dotfiles: DotfilesConfig
    malcolm: MalcolmConfig

    @property
    def sudo(self) -> tuple[str, ...]:
        """Command prefix used for privileged invocations."""
        return () if self.is_root else ("sudo",)

    @property
    def completions_dir(self) -> Path:
        """User-local bash completion directory."""
        return self.local_data / "bash-completion" / "completions"

    def expand(self, template: str) -> Path:
        """Expand ``{home}``-style placeholders in a path template."""
        return Path(
            template.format(
                home=self.home,
                local_bin=self.local_bin,
                local_data=self.local_data,
                local_config=self.local_config,
                completions=self.completions_dir,
            )
        ).expanduser()


_GITHUB = "https://github.com"

DEFAULTS: dict[str, object] = {
    "config_file": None,  # derived from XDG_CONFIG_HOME when absent
    "user": None,  # detected from the effective uid when absent
    "is_root": None,
    "home": None,
    "local_bin": None,
    "local_data": None,
    "local_config": None,
    "logs_dir": None,
    "guard": {
        "os_marker": "amazon-linux-extras",
        "required_tools": ["yum"],
    },
    "asdf": {
        "dir": None,
        "repo": f"{_GITHUB}/asdf-vm/asdf.git",
        "tools": ["age", "fd", "jq", "yq", "ripgrep", "watchexec"],
    },
    "packages": {
        "essential": ["curl", "git", "jq"],
        "extras": ["python3.8"],
        "yum": ["httpd-tools", "make", "openssl", "tmux", "wireshark"],
        "pip": ["dateparser", "mmguero", "requests"],
        "python_links": {
            "/usr/bin/python3.8": "/usr/bin/python3",
            "/usr/bin/pip3.8": "/usr/bin/pip3",
        },
    },
    "docker": {
        "compose_version": "1.29.2",
        "compose_path": "/usr/local/bin/docker-compose",
        "compose_url": (
            f"{_GITHUB}/docker/compose/releases/download/"
            "{version}/docker-compose-{system}-{machine}"
        ),
    },
    "system": {
        "sysctl_file": "/etc/sysctl.conf",
        "sysctl_marker": "swappiness",
        "sysctl_settings": [
            ["allow dmg reading", "kernel.dmesg_restrict", "0"],
            ["the maximum number of open file handles", "fs.file-max", "65536"],
            [
                "the maximum number of user inotify watches",
                "fs.inotify.max_user_watches",
                "131072",
            ],
            [
                "the maximum number of memory map areas a process may have",
                "vm.max_map_count",
                "262144",
            ],
            ["the maximum number of incoming connections", "net.core.somaxconn", "65535"],
            [
                'decrease "swappiness" (swapping out runtime memory vs. dropping pages)',
                "vm.swappiness",
                "1",
            ],
            [
                'the % of system memory fillable with "dirty" pages before flushing',
                "vm.dirty_background_ratio",
                "40",
            ],
            [
                "maximum % of dirty system memory before committing everything",
                "vm.dirty_ratio",
                "80",
            ],
        ],
        "limits_file": "/etc/security/limits.d/limits.conf",
        "limits": [
            "* soft nofile 65535",
            "* hard nofile 65535",
            "* soft memlock unlimited",
            "* hard memlock unlimited",
        ],
        "grub_file": "/etc/default/grub",
        "grub_marker": "cgroup",
        "grub_args": [
            "random.trust_cpu=on",
            "cgroup_enable=memory",
            "swapaccount=1",
            "cgroup.memory=nokmem",
        ],
        "grub_cfg": "/boot/grub2/grub.cfg",
    },
    "binaries": [
        {
            "name": "croc",
            "repo": "schollz/croc",
            "strip_v": True,
            "url": (
                f"{_GITHUB}/schollz/croc/releases/download/"
                "v{version}/croc_{version}_Linux-64bit.tar.gz"
            ),
            "members": {
                "croc": "{local_bin}/croc",
                "bash_autocomplete": "{completions}/croc.bash",
            },
        },
        {
            "name": "gron",
            "repo": "tomnomnom/gron",
            "strip_v": True,
            "url": (
                f"{_GITHUB}/tomnomnom/gron/releases/download/"
                "v{version}/gron-linux-amd64-{version}.tgz"
            ),
            "members": {"gron": "{local_bin}/gron"},
        },
        {
            "name": "sq",
            "repo": "neilotoole/sq",
            "strip_v": True,
            "url": f"{_GITHUB}/neilotoole/sq/releases/download/v{{version}}/sq-linux-amd64.tar.gz",
            "members": {"sq": "{local_bin}/sq"},
        },
        {
            "name": "ngrok",
            "archive": "zip",
            "url": "https://bin.equinox.io/c/4VmDzA7iaHb/ngrok-stable-linux-amd64.zip",
            "members": {"ngrok": "{local_bin}/ngrok"},
        },
        {
            "name": "bat",
            "repo": "sharkdp/bat",
            "strip_components": 1,
            "url": (
                f"{_GITHUB}/sharkdp/bat/releases/download/"
                "{version}/bat-{version}-x86_64-unknown-linux-musl.tar.gz"
            ),
            "members": {"bat": "{local_bin}/bat"},
        },
        {
            "name": "dra",
            "repo": "devmatteini/dra",
            "strip_components": 1,
            "url": (
                f"{_GITHUB}/devmatteini/dra/releases/download/"
                "{version}/dra-{version}.tar.gz"
            ),
            "members": {"dra": "{local_bin}/dra"},
        },
    ],
    "dotfiles": {
        "repo": f"{_GITHUB}/mmguero/dotfiles",
        "dest": None,  # derived from local_config when absent
        "links": {
            "bash/rc": "{home}/.bashrc",
            "bash/aliases": "{home}/.bash_aliases",
            "bash/functions": "{home}/.bash_functions",
            "bash/rc.d": "{home}/.bashrc.d",
            "git/gitconfig": "{home}/.gitconfig",
            "git/gitignore_global": "{home}/.gitignore_global",
            "git/git_clone_all.sh": "{local_bin}/git_clone_all.sh",
            "linux/tmux/tmux.conf": "{home}/.tmux.conf",
            "scripts/self_signed_key_gen.sh": "{local_bin}/self_signed_key_gen.sh",
            "bash/context-color/context-color": "{local_bin}/context-color",
        },
    },
    "malcolm": {
        "repo": f"{_GITHUB}/idaholab/Malcolm",
        "path": None,  # derived from home when absent
        "artifacts": None,
        "install_args": ["-c", "-d", "-r"],
        "compose_file": "docker-compose.yml",
        "compose_overrides": {
            "CAPA_MAX_REQUESTS": "2",
            "CLAMD_MAX_REQUESTS": "4",
            "EXTRACTED_FILE_ENABLE_CAPA": "'true'",
            "EXTRACTED_FILE_ENABLE_CLAMAV": "'true'",
            "EXTRACTED_FILE_ENABLE_YARA": "'true'",
            "EXTRACTED_FILE_HTTP_SERVER_ENABLE": "'true'",
            "EXTRACTED_FILE_HTTP_SERVER_ENCRYPT": "'false'",
            "EXTRACTED_FILE_IGNORE_EXISTING": "'true'",
            "EXTRACTED_FILE_PRESERVATION": "'all'",
            "FREQ_LOOKUP": "'true'",
            "LOGSTASH_OUI_LOOKUP": "'true'",
            "LOGSTASH_REVERSE_DNS": "'true'",
            "LOGSTASH_SEVERITY_SCORING": "'true'",
            "PCAP_PIPELINE_IGNORE_PREEXISTING": "'true'",
            "YARA_MAX_REQUESTS": "4",
            "ZEEK_AUTO_ANALYZE_PCAP_FILES": "'true'",
            "ZEEK_DISABLE_BEST_GUESS_ICS": "''",
            "ZEEK_EXTRACTOR_MODE": "'all'",
        },
        "helper_scripts": [
            "https://raw.githubusercontent.com/mmguero-dev/Malcolm/development/scripts/"
            "reset_and_auto_populate.sh",
            "https://raw.githubusercontent.com/mmguero-dev/Malcolm-PCAP/main/tools/"
            "pcap_time_shift.py",
        ],
        "samples": [
            "https://malcolm.fyi/examples/Cyberville.pcap",
            "https://malcolm.fyi/examples/net-map.json",
        ],
        "copy_samples": ["net-map.json"],
    },
}

ALLOWED_TOP_LEVEL_KEYS = set(DEFAULTS.keys())
ALLOWED_ARCHIVE_FORMATS = {"tar", "zip"}
_SECTION_KEYS: dict[str, set[str]] = {
    section: set(cast(Mapping[str, object], value).keys())
    for section, value in DEFAULTS.items()
    if isinstance(value, Mapping)
}


def load_config(
    config_file: str | os.PathLike[str] | None = None,
    *,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, object] | None = None,
) -> AppConfig:
    """Load and merge configuration sources into an :class:`AppConfig`."""
    merged: dict[str, object] = _deep_copy(DEFAULTS)
    resolved_env = dict(os.environ if env is None else env)

    config_path = _determine_config_path(config_file, resolved_env)

    file_values = _load_yaml_file(config_path)
    if file_values:
        _deep_merge(merged, file_values)

    env_values = _build_env_overrides(resolved_env)
    if env_values:
        _deep_merge(merged, env_values)

    if overrides:
        _deep_merge(merged, dict(overrides))

    merged["config_file"] = str(config_path)

    _validate_structure(merged)

    return _build_app_config(merged, resolved_env)


def _determine_config_path(
    cli_override: str | os.PathLike[str] | None,
    env: Mapping[str, str],
) -> Path:
    if cli_override:
        return Path(cli_override)
    if CONFIG_ENV_VAR in env:
        return Path(env[CONFIG_ENV_VAR])
    home = Path(env.get("HOME") or Path.home())
    config_home = Path(env.get("XDG_CONFIG_HOME") or home / ".config")
    return config_home / "hostprep" / "config.yml"


def _load_yaml_file(path: Path) -> dict[str, object]:
    if not path.is_file():
        return {}
    text = path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Cannot parse {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigError(f"Config file {path} must contain a mapping at the top level.")
    return _as_dict(data, str(path))


def _validate_structure(raw: Mapping[str, object]) -> None:
    unknown_keys = set(raw.keys()) - ALLOWED_TOP_LEVEL_KEYS
    if unknown_keys:
        joined = ", ".join(sorted(unknown_keys))
        raise ConfigError(f"Unknown configuration keys: {joined}.")

    for section, allowed in _SECTION_KEYS.items():
        mapping = _as_dict(raw.get(section), section)
        unknown = set(mapping.keys()) - allowed
        if unknown:
            joined = ", ".join(sorted(unknown))
            raise ConfigError(f"Unknown {section} configuration keys: {joined}.")

    docker_map = _as_dict(raw.get("docker"), "docker")
    compose_version = docker_map.get("compose_version")
    if compose_version is not None:
        try:
            Version(str(compose_version))
        except InvalidVersion as exc:
            raise ConfigError(
                f"docker.compose_version must be a release version. Got {compose_version!r}."
            ) from exc

    binaries = _as_sequence(raw.get("binaries") or [], "binaries")
    seen: set[str] = set()
    for index, entry in enumerate(binaries):
        mapping = _as_dict(entry, f"binaries[{index}]")
        name = mapping.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ConfigError(f"binaries[{index}].name must be a non-empty string.")
        if name in seen:
            raise ConfigError(f"Duplicate binary name '{name}'.")
        seen.add(name)
        if not isinstance(mapping.get("url"), str):
            raise ConfigError(f"binaries[{index}].url must be a string.")
        archive = str(mapping.get("archive", "tar"))
        if archive not in ALLOWED_ARCHIVE_FORMATS:
            allowed = ", ".join(sorted(ALLOWED_ARCHIVE_FORMATS))
            raise ConfigError(
                f"Unsupported archive format '{archive}' for {name}. Allowed: {allowed}."
            )


def _build_app_config(raw: Mapping[str, object], env: Mapping[str, str]) -> AppConfig:
    config_file = _to_path(raw["config_file"])

    user_value = raw.get("user")
    root_value = raw.get("is_root")
    is_root = os.geteuid() == 0 if root_value is None else bool(root_value)
    if user_value is None:
        user = "root" if is_root else getpass.getuser()
    else:
        user = _expect_str(user_value, "user")

    home = _path_or(raw.get("home"), Path(env.get("HOME") or Path.home()))
    local_bin = _path_or(raw.get("local_bin"), home / ".local" / "bin")
    local_data = _path_or(
        raw.get("local_data"),
        Path(env.get("XDG_DATA_HOME") or home / ".local" / "share"),
    )
    local_config = _path_or(
        raw.get("local_config"),
        Path(env.get("XDG_CONFIG_HOME") or home / ".config"),
    )
    logs_dir = _path_or(raw.get("logs_dir"), local_data / "hostprep" / "logs")

    guard_map = _as_dict(raw.get("guard"), "guard")
    guard = GuardConfig(
        os_marker=str(guard_map.get("os_marker", "amazon-linux-extras")),
        required_tools=_str_tuple(guard_map.get("required_tools"), "guard.required_tools"),
    )

    asdf_map = _as_dict(raw.get("asdf"), "asdf")
    asdf = AsdfConfig(
        dir=_path_or(asdf_map.get("dir"), Path(env.get("ASDF_DIR") or home / ".asdf")),
        repo=str(asdf_map.get("repo", "")),
        tools=_str_tuple(asdf_map.get("tools"), "asdf.tools"),
    )

    packages_map = _as_dict(raw.get("packages"), "packages")
    packages = PackagesConfig(
        essential=_str_tuple(packages_map.get("essential"), "packages.essential"),
        extras=_str_tuple(packages_map.get("extras"), "packages.extras"),
        yum=_str_tuple(packages_map.get("yum"), "packages.yum"),
        pip=_str_tuple(packages_map.get("pip"), "packages.pip"),
        python_links=_pairs(packages_map.get("python_links"), "packages.python_links"),
    )

    docker_map = _as_dict(raw.get("docker"), "docker")
    docker = DockerConfig(
        compose_version=str(docker_map.get("compose_version", "1.29.2")),
        compose_path=_to_path(docker_map.get("compose_path", "/usr/local/bin/docker-compose")),
        compose_url=_expect_str(docker_map.get("compose_url"), "docker.compose_url"),
    )

    system_map = _as_dict(raw.get("system"), "system")
    settings: list[tuple[str, str, str]] = []
    for index, entry in enumerate(
        _as_sequence(system_map.get("sysctl_settings") or [], "system.sysctl_settings")
    ):
        parts = _as_sequence(entry, f"system.sysctl_settings[{index}]")
        if len(parts) != 3:
            raise ConfigError(
                f"system.sysctl_settings[{index}] must be [comment, key, value]."
            )
        comment, key, value = (str(part) for part in parts)
        settings.append((comment, key, value))
    system = SystemConfig(
        sysctl_file=_to_path(system_map.get("sysctl_file", "/etc/sysctl.conf")),
        sysctl_marker=str(system_map.get("sysctl_marker", "swappiness")),
        sysctl_settings=tuple(settings),
        limits_file=_to_path(system_map.get("limits_file", "/etc/security/limits.d/limits.conf")),
        limits=_str_tuple(system_map.get("limits"), "system.limits"),
        grub_file=_to_path(system_map.get("grub_file", "/etc/default/grub")),
        grub_marker=str(system_map.get("grub_marker", "cgroup")),
        grub_args=_str_tuple(system_map.get("grub_args"), "system.grub_args"),
        grub_cfg=_to_path(system_map.get("grub_cfg", "/boot/grub2/grub.cfg")),
    )

    binaries: list[BinaryRelease] = []
    for index, entry in enumerate(_as_sequence(raw.get("binaries") or [], "binaries")):
        mapping = _as_dict(entry, f"binaries[{index}]")
        repo = mapping.get("repo")
        binaries.append(
            BinaryRelease(
                name=str(mapping["name"]),
                url=str(mapping["url"]),
                repo=str(repo) if repo else None,
                archive=str(mapping.get("archive", "tar")),
                strip_v=bool(mapping.get("strip_v", False)),
                strip_components=_expect_int(
                    mapping.get("strip_components"),
                    f"binaries[{index}].strip_components",
                    default=0,
                ),
                members=_pairs(mapping.get("members"), f"binaries[{index}].members"),
            )
        )

    dotfiles_map = _as_dict(raw.get("dotfiles"), "dotfiles")
    dotfiles = DotfilesConfig(
        repo=_expect_str(dotfiles_map.get("repo"), "dotfiles.repo"),
        dest=_path_or(dotfiles_map.get("dest"), local_config / "sgrover.dotfiles"),
        links=_pairs(dotfiles_map.get("links"), "dotfiles.links"),
    )

    malcolm_map = _as_dict(raw.get("malcolm"), "malcolm")
    malcolm = MalcolmConfig(
        repo=_expect_str(malcolm_map.get("repo"), "malcolm.repo"),
        path=_path_or(malcolm_map.get("path"), home / "Malcolm"),
        artifacts=_path_or(malcolm_map.get("artifacts"), home / "artifacts"),
        install_args=_str_tuple(malcolm_map.get("install_args"), "malcolm.install_args"),
        compose_file=str(malcolm_map.get("compose_file", "docker-compose.yml")),
        compose_overrides=_pairs(
            malcolm_map.get("compose_overrides"), "malcolm.compose_overrides"
        ),
        helper_scripts=_str_tuple(malcolm_map.get("helper_scripts"), "malcolm.helper_scripts"),
        samples=_str_tuple(malcolm_map.get("samples"), "malcolm.samples"),
        copy_samples=_str_tuple(malcolm_map.get("copy_samples"), "malcolm.copy_samples"),
    )

    return AppConfig(
        config_file=config_file,
        user=user,
        is_root=is_root,
        home=home,
        local_bin=local_bin,
        local_data=local_data,
        local_config=local_config,
        logs_dir=logs_dir,
        guard=guard,
        asdf=asdf,
        packages=packages,
        docker=docker,
        system=system,
        binaries=tuple(binaries),
        dotfiles=dotfiles,
        malcolm=malcolm,
    )


def _build_env_overrides(env: Mapping[str, str]) -> dict[str, object]:
    overrides: dict[str, object] = {}
    for key in sorted(env):
        if key in RESERVED_ENV_KEYS or not key.startswith(ENV_PREFIX):
            continue
        path = [part.lower() for part in key.removeprefix(ENV_PREFIX).split("__") if part]
        if path:
            _assign_nested(overrides, path, _coerce_value(env[key]))
    return overrides


def _assign_nested(tree: MutableMapping[str, object], path: list[str], value: object) -> None:
    node = tree
    for depth, segment in enumerate(path[:-1], start=1):
        child = node.setdefault(segment, {})
        if not isinstance(child, MutableMapping):
            prefix = ".".join(path[:depth])
            raise ConfigError(f"{ENV_PREFIX} override {'.'.join(path)} conflicts with {prefix}.")
        node = cast(MutableMapping[str, object], child)
    node[path[-1]] = value


def _deep_merge(target: MutableMapping[str, object], overrides: Mapping[str, object]) -> None:
    for key, value in overrides.items():
        current = target.get(key)
        if isinstance(current, MutableMapping) and isinstance(value, Mapping):
            _deep_merge(current, _as_dict(value, key))
        else:
            target[key] = value


def _deep_copy(source: Mapping[str, object]) -> dict[str, object]:
    result: dict[str, object] = {}
    for key, value in source.items():
        if isinstance(value, Mapping):
            result[key] = _deep_copy(_as_dict(value, f"copy.{key}"))
        elif isinstance(value, list):
            result[key] = list(value)
        else:
            result[key] = value
    return result


def _as_sequence(value: object, label: str) -> Sequence[object]:
    if isinstance(value, (str, bytes)):
        raise ConfigError(f"Expected {label} to be a sequence. Got {type(value).__name__}.")
    if not isinstance(value, Sequence):
        raise ConfigError(f"Expected {label} to be a sequence. Got {type(value).__name__}.")
    return value


def _str_tuple(value: object | None, label: str) -> tuple[str, ...]:
    if value is None:
        return ()
    return tuple(str(item) for item in _as_sequence(value, label))


def _pairs(value: object | None, label: str) -> tuple[tuple[str, str], ...]:
    """Return ordered key/value pairs from a mapping."""
    mapping = _as_dict(value, label)
    return tuple((key, "" if item is None else str(item)) for key, item in mapping.items())


def _coerce_value(raw: str) -> object:
    text = raw.strip()
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError:
        return text


def _to_path(value: object) -> Path:
    if not isinstance(value, str) or not value:
        raise ConfigError(f"Expected a filesystem path. Got {value!r}.")
    return Path(value).expanduser()


def _path_or(value: object | None, default: Path) -> Path:
    if value is None or value == "":
        return default
    return _to_path(value)


def _expect_int(value: object | None, label: str, *, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"Expected {label} to be an integer. Got {value!r}.")
    return value


def _expect_str(value: object, key: str) -> str:
    if isinstance(value, str):
        return value
    raise ConfigError(f"Expected {key} to resolve to a string. Got {value!r}.")


def _as_dict(value: object | None, label: str) -> dict[str, object]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigError(f"Expected {label} to be a mapping. Got {type(value).__name__}.")
    bad = [key for key in value if not isinstance(key, str)]
    if bad:
        raise ConfigError(f"Mapping {label} must use string keys. Got {bad[0]!r}.")
    return dict(value)


__all__ = [
    "AppConfig",
    "AsdfConfig",
    "BinaryRelease",
    "ConfigError",
    "DockerConfig",
    "DotfilesConfig",
    "GuardConfig",
    "MalcolmConfig",
    "PackagesConfig",
    "SystemConfig",
    "load_config",
]
