class DefenderTestError(Exception):
    """Base class for every failure that aborts a run."""


class InvalidRootPathError(DefenderTestError):
    def __init__(self, path):
        self.path = path
        super().__init__('Provided path {} does not exist'.format(path))


class InvalidTargetError(DefenderTestError):
    pass


class DirectoryCreationError(DefenderTestError):
    def __init__(self, path):
        self.path = path
        super().__init__('Failed to create directory {}'.format(path))


class InodeCreationError(DefenderTestError):
    """stage is 'create' when the file could not be opened,
    'write' when the single byte could not be written
    """
    def __init__(self, path, stage):
        self.path = path
        self.stage = stage
        if stage == 'write':
            msg = 'Failed to write to inode file {}'.format(path)
        else:
            msg = 'Failed to create inode file {}'.format(path)
        super().__init__(msg)
