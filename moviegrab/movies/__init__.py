"""Movie metadata models and the lookup client."""