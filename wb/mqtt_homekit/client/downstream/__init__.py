#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Downstream adapters and codecs

Downstream = the item runtime side of the bridge (devices on the controller)

Each downstream implementation is placed into its own package under:

  wb.mqtt_homekit.client.downstream.<name>/

Example:
  - mqtt_wb_conv  (MQTT using Wiren Board conventions)
"""
