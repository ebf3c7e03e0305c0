"""A set of universal constants and definitions."""

from typing import Final, Literal

#: Gyro cols in sensor frame (X forward, Y right, Z down)
SF_GYR_COLS = ["gyr_x", "gyr_y", "gyr_z"]

#: Acc cols in sensor frame
SF_ACC_COLS = ["acc_x", "acc_y", "acc_z"]

#: Sensor cols in the order expected for plain ``n x 6`` arrays
SF_SENSOR_COLS = [*SF_ACC_COLS, *SF_GYR_COLS]

#: The gyro axis the sensor pitches around during walking
PITCH_GYR_COL: Final = "gyr_y"

#: Name of the feet
FEET: Final = ("right", "left")
Foot = Literal["right", "left"]

#: Event columns of a stride list only containing heel strikes
HS_STRIDE_COLS: Final = ("rhs", "lhs", "end")

#: Event columns of a stride list containing heel strikes and toe offs
HS_TO_STRIDE_COLS: Final = ("rhs", "lto", "lhs", "rto", "end")

#: Index name of stride lists
STRIDE_ID_COL: Final = "stride_id"
