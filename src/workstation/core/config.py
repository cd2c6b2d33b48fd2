"""Configuration management for the workstation provisioner."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError

VIM_CONFIG = """
set laststatus=2
set t_Co=256
set number
syntax on
autocmd BufWinLeave *.* mkview
autocmd BufWinEnter *.* silent! loadview
if empty(glob('~/.vim/autoload/plug.vim'))
  silent !curl -fLo ~/.vim/autoload/plug.vim --create-dirs
    \\ https://raw.githubusercontent.com/junegunn/vim-plug/master/plug.vim
  autocmd VimEnter * PlugInstall --sync | source $MYVIMRC
endif
call plug#begin('~/.vim/plugged')
  Plug 'vim-airline/vim-airline'
  Plug 'morhetz/gruvbox'
  Plug 'mattn/emmet-vim'
  Plug 'tpope/vim-fugitive'
  Plug 'tpope/vim-sensible'
  Plug 'junegunn/seoul256.vim'
call plug#end()
"""

ZSH_CONFIG = """
export ZSH="$HOME/.oh-my-zsh"
ZSH_THEME="robbyrussell"
plugins=(git tmux)
source $ZSH/oh-my-zsh.sh
"""

FONT_MODES = ("never", "ask", "always")

DEFAULT_CONFIG: Dict[str, Any] = {
    "home": "~",
    "packages": ["git", "vim", "tmux", "curl", "zsh", "python3", "flatpak"],
    "oh_my_zsh": {
        "url": "https://raw.githubusercontent.com/ohmyzsh/ohmyzsh/master/tools/install.sh",
        "dir": ".oh-my-zsh",
    },
    "vim": {
        "path": ".vimrc",
        "content": VIM_CONFIG,
    },
    "zsh": {
        "path": ".zshrc",
        "content": ZSH_CONFIG,
    },
    "tmux": {
        "repo": "https://github.com/jiimothy/tmux_config.git",
        "script": "tmux_config.sh",
    },
    "fonts": {
        "repo": "https://github.com/fam007e/nerd_fonts_installer.git",
        "script": "nerdfonts_installer.sh",
        "mode": "never",
    },
}

# Sections whose values are merged key by key rather than replaced
SECTIONS = ("oh_my_zsh", "vim", "zsh", "tmux", "fonts")


class Config:
    """Configuration class for the provisioner.

    Starts from DEFAULT_CONFIG and merges user supplied values on top. Relative
    target paths are resolved against the configured home directory.
    """

    def __init__(self) -> None:
        """Initialize configuration."""
        self.config: Dict[str, Any] = {}
        self.home: Path = Path("~").expanduser()
        self.packages: List[str] = []
        self.load_config()

    def load_config(self, config_file: Optional[Path] = None) -> None:
        """Load configuration from file.

        Raises:
            ConfigError: If the file cannot be read or holds invalid values.
        """
        self._merge_config(DEFAULT_CONFIG)

        if config_file is not None:
            try:
                with open(config_file, "r") as f:
                    user_config = yaml.safe_load(f)
            except (OSError, yaml.YAMLError) as e:
                raise ConfigError(f"Error loading config file {config_file}: {e}") from e
            if user_config:
                self._merge_config(user_config)

    def _merge_config(self, config: Dict[str, Any]) -> None:
        """Merge configuration with current configuration."""
        if not isinstance(config, dict):
            raise ConfigError("Configuration must be a dictionary")

        for key, value in config.items():
            if key in SECTIONS:
                if not isinstance(value, dict):
                    raise ConfigError(f"{key} must be a dictionary")
                section = self.config.setdefault(key, {})
                section.update(copy.deepcopy(value))
            else:
                self.config[key] = copy.deepcopy(value)

        if "home" in config:
            if not isinstance(config["home"], str):
                raise ConfigError("home must be a string")
            self.home = Path(config["home"]).expanduser()

        if "packages" in config:
            if not isinstance(config["packages"], list):
                raise ConfigError("packages must be a list")
            self.packages = [str(p) for p in config["packages"]]

        fonts = config.get("fonts", {})
        if "mode" in fonts and fonts["mode"] not in FONT_MODES:
            raise ConfigError(f"fonts.mode must be one of {', '.join(FONT_MODES)}")

    def validate(self) -> List[str]:
        """Validate configuration."""
        errors = []

        if not self.packages:
            errors.append("packages must not be empty")
        for package in self.packages:
            if not package or package.startswith("-"):
                errors.append(f"package name {package!r} is not valid")

        for section in SECTIONS:
            values = self.config.get(section)
            if not isinstance(values, dict):
                errors.append(f"{section} must be a dictionary")
                continue
            for key, value in values.items():
                if not isinstance(value, str):
                    errors.append(f"{section}.{key} must be a string")

        if self.font_mode not in FONT_MODES:
            errors.append(f"fonts.mode must be one of {', '.join(FONT_MODES)}")

        return errors

    def section(self, name: str) -> Dict[str, Any]:
        """Get a configuration section such as ``vim`` or ``tmux``."""
        return self.config.get(name, {})

    def resolve_path(self, path: str) -> Path:
        """Resolve a target path against the configured home directory.

        Args:
            path: Absolute path, ``~``-prefixed path, or path relative to home.

        Returns:
            Path: The absolute target path.
        """
        if path == "~":
            return self.home
        if path.startswith("~/"):
            return self.home / path[2:]
        target = Path(path)
        if target.is_absolute():
            return target
        return self.home / target

    @property
    def font_mode(self) -> str:
        """How the optional fonts step is gated: never, ask or always."""
        return self.section("fonts").get("mode", "never")

    def set_font_mode(self, mode: str) -> None:
        """Override the fonts step gating."""
        self._merge_config({"fonts": {"mode": mode}})

    def target_files(self) -> Dict[str, Path]:
        """Get the configuration files written by a run, keyed by section."""
        return {name: self.resolve_path(self.section(name)["path"]) for name in ("vim", "zsh")}

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value.

        Args:
            key: The configuration key to get.
            default: The default value to return if the key is not found.

        Returns:
            The configuration value, or the default if not found.
        """
        return self.config.get(key, default)
