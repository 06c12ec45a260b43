"""Build drivers."""

from releasebox.build.cargo_driver import CargoBuildDriver, create_cargo_build_driver


__all__ = ["CargoBuildDriver", "create_cargo_build_driver"]
