"""Line protocol spoken by the bridge helper.

Every command is one ASCII line of comma-separated fields::

    ATMOLIGHT,Color,<r>,<g>,<b>,<priority>,<brightness>
    ATMOLIGHT,Power,ON
    ATMOLIGHT,Group,OnlyActivate,<group>
    ATMOLIGHT,Group,SetStaticColor,<group>,<color>
    ATMOLIGHT,Room,<room>
"""

from ambilink.models import ColorCommand, CommandType

APP_TAG = "ATMOLIGHT"


def encode_command(command_type: CommandType, *fields: object, terminator: bytes = b"") -> bytes:
    """Join the app tag, command type and fields into one line."""
    line = ",".join([APP_TAG, command_type.value, *(str(field) for field in fields)])
    return line.encode("ascii") + terminator


def encode_color(command: ColorCommand, terminator: bytes = b"") -> bytes:
    return encode_command(CommandType.COLOR, *command.as_fields(), terminator=terminator)


def encode_power(on: bool, terminator: bytes = b"") -> bytes:
    return encode_command(CommandType.POWER, "ON" if on else "OFF", terminator=terminator)
