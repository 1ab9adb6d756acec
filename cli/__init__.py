# DriverKit - WebDriver Process Supervision
# Copyright (C) 2026 DriverKit Authors
# SPDX-License-Identifier: Apache-2.0
