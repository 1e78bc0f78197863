import numpy as np
from blockconv import (
    LoggingConfig,
    RealTimeFilter,
    linear_convolve,
    overlap_add_filter,
    overlap_save_filter,
    setup_logging,
)

setup_logging(LoggingConfig(level="DEBUG"))

# Direct linear convolution
x = [1, 2, 3, 4, 5]
h = [1, 2, 1, 2, 1]
print("linear:      ", linear_convolve(x, h))

# Block methods reproduce the direct result
x = [1, 2, 3, 2]
h = [1, 2, 1]
print("overlap-add: ", overlap_add_filter(x, h, block_length=3))
print("overlap-save:", overlap_save_filter(x, h, block_length=4))

# Streaming, one sample at a time
rt = RealTimeFilter(h)
print("real-time:   ", np.array([rt.process(s) for s in x]))
