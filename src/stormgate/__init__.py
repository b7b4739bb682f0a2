#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from stormgate.const import DefaultValues as DefaultValues
from stormgate.data_containers import ProjectOptions as ProjectOptions
from stormgate.gateway import ParameterGateway as ParameterGateway
from stormgate.gateway_error import ErrorCode as ErrorCode
from stormgate.gateway_error import GatewayError as GatewayError
from stormgate.project import Project as Project
from stormgate.project_builder import ProjectBuilder as ProjectBuilder
from stormgate.toolkit_api import ToolkitAPI as ToolkitAPI
from stormgate.units import UnitConverter as UnitConverter
