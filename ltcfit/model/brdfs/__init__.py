from .factory import BrdfFactory
from .base_brdf import Brdf
from .ggx import BrdfGGX
from .beckmann import BrdfBeckmann
from .disney_diffuse import BrdfDisneyDiffuse
from .lambertian import BrdfLambertian

# Register available BRDFs
BrdfFactory.register("ggx", BrdfGGX)
BrdfFactory.register("beckmann", BrdfBeckmann)
BrdfFactory.register("disney_diffuse", BrdfDisneyDiffuse)
BrdfFactory.register("lambertian", BrdfLambertian)
