"""Library for totaling the hours recorded on a timecard."""


# Copyright (c) 2020 Aubrey Barnard.
#
# This is free software released under the MIT License
# (https://choosealicense.com/licenses/mit/).


__version__ = '0.1.0'
