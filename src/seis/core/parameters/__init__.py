from .codec import (
    decode_params,
    dumps_params,
    encode_params,
    load_params_file,
    loads_params,
    save_params_file,
)
from .meta import ParamMeta
from .params import (
    NOISE_FUNCTION_CHOICES,
    PARAM_GROUPS,
    PARAM_NAMES,
    LayerSettings,
    SeisParams,
    coerce_param_value,
    params_from_mapping,
    parse_assignment,
    sanitize_params,
    seis_meta,
)

__all__ = [
    "LayerSettings",
    "NOISE_FUNCTION_CHOICES",
    "PARAM_GROUPS",
    "PARAM_NAMES",
    "ParamMeta",
    "SeisParams",
    "coerce_param_value",
    "decode_params",
    "dumps_params",
    "encode_params",
    "load_params_file",
    "loads_params",
    "params_from_mapping",
    "parse_assignment",
    "sanitize_params",
    "save_params_file",
    "seis_meta",
]
