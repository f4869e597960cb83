#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Gafpack v0.1.0

Version information.

Author: Gafpack Development Team
License: Dual License (Academic/Commercial)
"""

__version__ = "0.1.0"

# Gafpack v0.1.0
# Any usage is subject to this software's license.
