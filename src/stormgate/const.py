# coding=utf8
"""
Copyright (C) 2025 Laurent Courty

This program is free software; you can redistribute it and/or
modify it under the terms of the GNU General Public License
as published by the Free Software Foundation; either version 2
of the License, or (at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU General Public License for more details.
"""

from enum import IntEnum, StrEnum


class DefaultValues:
    """Default values and engine constants"""

    # Parameter id of a flow-type external inflow
    FLOW_INFLOW_PARAM = -1
    # Default external inflow scale factor and baseline
    INFLOW_SCALE = 1.0
    INFLOW_BASELINE = 0.0
    # Liters per cubic foot
    LITERS_PER_FT3 = 28.317
    SECONDS_PER_HOUR = 3600.0
    # Manning's equation constant in US units
    PHI = 1.486
    # Fraction of impervious area without depression storage
    PCT_ZERO = 0.25
    # Default Manning's n for sub-areas
    N_IMPERV = 0.01
    N_PERV = 0.1
    # Date and time formats used for string exchange
    DATE_FORMAT = "%m/%d/%Y"
    TIME_FORMAT = "%H:%M:%S"
    DATETIME_FORMAT = f"{DATE_FORMAT} {TIME_FORMAT}"
    # Rule name attached to control actions issued through the gateway
    CONTROL_RULE_NAME = "ToolkitAPI"


class VerbosityLevel(IntEnum):
    """Messenger verbosity levels"""

    SUPER_QUIET = 0
    QUIET = 1
    MESSAGE = 2
    VERBOSE = 3
    DEBUG = 4


class ObjectType(IntEnum):
    GAGE = 0  # rain gage
    SUBCATCH = 1  # subcatchment
    NODE = 2  # conveyance system node
    LINK = 3  # conveyance system link
    POLLUT = 4  # pollutant
    LANDUSE = 5  # land use category
    TIMEPATTERN = 6  # dry weather flow time pattern
    CURVE = 7  # generic table of values
    TSERIES = 8  # generic time series of values
    TRANSECT = 10  # irregular channel cross-section
    AQUIFER = 11  # groundwater aquifer
    UNITHYD = 12  # RDII unit hydrograph
    SNOWMELT = 13  # snowmelt parameter set
    LID = 15  # LID control


class NodeType(IntEnum):
    JUNCTION = 0
    OUTFALL = 1
    STORAGE = 2
    DIVIDER = 3


class LinkType(IntEnum):
    CONDUIT = 0
    PUMP = 1
    ORIFICE = 2
    WEIR = 3
    OUTLET = 4


class OutfallType(StrEnum):
    FREE = "free"
    NORMAL = "normal"
    FIXED = "fixed"
    TIDAL = "tidal"
    TIMESERIES = "timeseries"
    STAGED = "staged"


class GageDataSource(StrEnum):
    TIMESERIES = "timeseries"
    FILE = "file"
    EXTERNAL = "externally supplied"


class UnitSystem(IntEnum):
    US = 0
    SI = 1


class FlowUnits(IntEnum):
    CFS = 0
    GPM = 1
    MGD = 2
    CMS = 3
    LPS = 4
    MLD = 5


class Quantity(IntEnum):
    """Categories of physical quantities subject to unit conversion"""

    RAINFALL = 0  # in/hr, mm/hr
    RAINDEPTH = 1  # in, mm
    EVAPRATE = 2  # in/day, mm/day
    LENGTH = 3  # ft, m
    LANDAREA = 4  # ac, ha
    VOLUME = 5  # ft3, m3
    WINDSPEED = 6  # mph, km/hr
    TEMPERATURE = 7  # deg F, deg C
    MASS = 8  # lb, kg
    GWFLOW = 9  # cfs/ac, cms/ha
    FLOW = 10  # depends on FlowUnits


class PollutantUnits(StrEnum):
    MG_PER_L = "mg/L"
    UG_PER_L = "ug/L"
    COUNT_PER_L = "#/L"


class LidType(StrEnum):
    BIO_CELL = "bio-retention cell"
    RAIN_GARDEN = "rain garden"
    GREEN_ROOF = "green roof"
    INFIL_TRENCH = "infiltration trench"
    POROUS_PAVEMENT = "permeable pavement"
    RAIN_BARREL = "rain barrel"
    ROOF_DISCON = "rooftop disconnection"
    VEG_SWALE = "vegetative swale"


class LidLayer(IntEnum):
    SURFACE = 0
    SOIL = 1
    STORAGE = 2
    PAVEMENT = 3
    DRAIN = 4
    DRAINMAT = 5


class NodeProperty(IntEnum):
    INVERT_ELEV = 0
    FULL_DEPTH = 1
    SURCHARGE_DEPTH = 2
    POND_AREA = 3
    INIT_DEPTH = 4


class LinkProperty(IntEnum):
    OFFSET1 = 0
    OFFSET2 = 1
    INIT_FLOW = 2
    FLOW_LIMIT = 3
    INLET_LOSS = 4
    OUTLET_LOSS = 5
    AVG_LOSS = 6


class SubcatchProperty(IntEnum):
    WIDTH = 0
    AREA = 1
    FRAC_IMPERV = 2
    SLOPE = 3
    CURB_LENGTH = 4


class LidUnitProperty(IntEnum):
    UNIT_AREA = 0
    FULL_WIDTH = 1
    BOTTOM_WIDTH = 2
    INIT_SAT = 3
    FROM_IMPERV = 4


class LidUnitOption(IntEnum):
    INDEX = 0
    NUMBER = 1
    TO_PERV = 2
    DRAIN_SUBCATCH = 3
    DRAIN_NODE = 4


class LidLayerProperty(IntEnum):
    THICKNESS = 0
    VOID_FRAC = 1
    ROUGHNESS = 2
    SURF_SLOPE = 3
    SIDE_SLOPE = 4
    ALPHA = 5
    POROSITY = 6
    FIELD_CAP = 7
    WILT_POINT = 8
    SUCTION = 9
    KSAT = 10
    KSLOPE = 11
    CLOG_FACTOR = 12
    IMPERV_FRAC = 13
    REGEN_DAYS = 14
    REGEN_DEGREE = 15
    COEFF = 16
    EXPON = 17
    OFFSET = 18
    DELAY = 19
    H_OPEN = 20
    H_CLOSE = 21


class NodeResult(IntEnum):
    TOTAL_INFLOW = 0
    TOTAL_OUTFLOW = 1
    LOSSES = 2
    VOLUME = 3
    FLOODING = 4
    DEPTH = 5
    HEAD = 6
    LATERAL_INFLOW = 7


class LinkResult(IntEnum):
    FLOW = 0
    DEPTH = 1
    VOLUME = 2
    US_SURF_AREA = 3
    DS_SURF_AREA = 4
    SETTING = 5
    TARGET_SETTING = 6
    FROUDE = 7


class SubcatchResult(IntEnum):
    RAINFALL = 0
    EVAP = 1
    INFIL = 2
    RUNON = 3
    RUNOFF = 4
    SNOW_DEPTH = 5


class SubcatchPollutant(IntEnum):
    BUILDUP = 0
    PONDED_CONC = 1


class LidGroupResult(IntEnum):
    PERV_AREA = 0
    FLOW_TO_PERV = 1
    OLD_DRAIN_FLOW = 2
    NEW_DRAIN_FLOW = 3


class LidUnitResult(IntEnum):
    INFLOW = 0
    EVAP = 1
    INFIL = 2
    SURF_FLOW = 3
    DRAIN_FLOW = 4
    INIT_VOL = 5
    FINAL_VOL = 6
    SURF_DEPTH = 7
    PAVE_DEPTH = 8
    SOIL_MOIST = 9
    STOR_DEPTH = 10
    DRY_TIME = 11
    OLD_DRAIN_FLOW = 12
    NEW_DRAIN_FLOW = 13
    EVAP_RATE = 14
    NATIVE_INFIL = 15
    SURF_INFLOW = 16
    SURF_INFIL = 17
    SURF_EVAP = 18
    SURF_OUTFLOW = 19
    PAVE_EVAP = 20
    PAVE_PERC = 21
    SOIL_EVAP = 22
    SOIL_PERC = 23
    STORAGE_INFLOW = 24
    STORAGE_EXFIL = 25
    STORAGE_EVAP = 26
    STORAGE_DRAIN = 27


class SimulationTime(IntEnum):
    START_DATE = 0
    END_DATE = 1
    REPORT_DATE = 2


class SimulationUnit(IntEnum):
    SYSTEM_UNIT = 0
    FLOW_UNIT = 1


class AnalysisSetting(IntEnum):
    ALLOW_POND = 0
    SKIP_STEADY = 1
    IGNORE_RAIN = 2
    IGNORE_RDII = 3
    IGNORE_SNOW = 4
    IGNORE_GW = 5
    IGNORE_ROUTE = 6
    IGNORE_QUAL = 7


class SimulationParam(IntEnum):
    ROUTE_STEP = 0
    MIN_ROUTE_STEP = 1
    LENGTH_STEP = 2
    START_DRY_DAYS = 3
    COURANT_FACTOR = 4
    MIN_SURF_AREA = 5
    MIN_SLOPE = 6
    RUNOFF_ERROR = 7
    GW_ERROR = 8
    FLOW_ERROR = 9
    QUAL_ERROR = 10
    HEAD_TOL = 11
    SYS_FLOW_TOL = 12
    LAT_FLOW_TOL = 13
