from ._exceptions import (
    ContractionInvariantError,
    GraphConstructionError,
    IndexOutOfRangeError,
    NonexistentNodeError,
    OccupiedIndexError,
    SelfEdgeError,
)
from ._network import (
    ConnectedTensorNetwork,
    Edge,
    IndexLocation,
    Node,
    TensorNetwork,
    retained_indexes,
)
