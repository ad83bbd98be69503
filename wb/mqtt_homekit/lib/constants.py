"""
  File with all constants in project
"""

# Configuration file paths
CONFIG_PATH = "/etc/wb-mqtt-homekit.conf"
# Logger name of the bridge service (syslog/journald identifier)
WB_MQTT_HOMEKIT_LOGGER_NAME = "wb-mqtt-homekit"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
# Wiren Board MQTT conventions
WB_DEVICES_PREFIX = "devices"
WB_CONTROLS_SEGMENT = "controls"
WB_COMMAND_SUFFIX = "on"
