class BrdfFactory:
    _brdfs = {}

    @classmethod
    def register(cls, name, brdf_class):
        cls._brdfs[name] = brdf_class

    @classmethod
    def create(cls, brdf_name):
        if brdf_name not in cls._brdfs:
            raise ValueError(f"Unknown BRDF: {brdf_name}. Available BRDFs: {list(cls._brdfs.keys())}")
        return cls._brdfs[brdf_name]()

    @classmethod
    def available(cls):
        return sorted(cls._brdfs.keys())
