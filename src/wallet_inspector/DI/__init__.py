# -*- coding: utf-8 -*-
"""Dependency injection."""

from wallet_inspector.DI.container import Container

__all__ = ["Container"]
