import os
import platform

from configobj import ConfigObj, ConfigObjError, Section, flatten_errors
from configobj.validate import Validator

# The default extension for configuration files
config_extension = '.cfg'

# The base name of the bridge configuration
default_name = 'thermobridge'


def config_flavor(name, flavor=None):
    configname = name if not flavor else name + '.' + flavor
    return configname


def config_filename(name, directory=None):
    """
    Determines the location of a config file. By default, config files live alongside this module.
    """
    if directory is None:
        directory = os.path.dirname(os.path.abspath(__file__))
    return os.path.join(directory, name + config_extension)


def load_config_file_base(file, must_exist=True):
    """
    Loads a configuration file
    :param file:        The configuration file to load
    :param must_exist:  when True, the file must exist or an exception is thrown.
    :return: The ConfigObj instance for the file.
    """
    if must_exist or os.path.exists(file):
        return ConfigObj(file, file_error=must_exist)
    return ConfigObj()


def config_flavor_file(name, directory=None, flavor=None, must_exist=False) -> ConfigObj:
    """
    Loads a specialization of a config file. The configuration file is expected to be named
    after the base, followed by a period and then the specialization, if the specialization is given,
    otherwise just the base name.
    """
    return load_config_file_base(config_filename(config_flavor(name, flavor), directory), must_exist)


def load_config(name=default_name, directory=None, user_dir='~', overrides=None):
    """
        Loads all the configuration files that relate to the given name.
        Configurations are merged in this order, later values replacing earlier ones:
        - the default specialization (must exist)
        - the platform specialization
        - the user override, in the user's home directory
        - the local configuration
        - any overrides given as a dict
        The merged configuration is validated against the "schema" specialization, which
        also supplies defaults for missing values and converts values to their declared types.
    :param name: the base name of the configuration to load.
    :param directory: the directory containing the default, platform, schema and local files
    :return: the validated ConfigObj
    :raises ConfigObjError: when the configuration fails validation
    """
    config = ConfigObj()
    config.merge(config_flavor_file(name, directory, 'default', must_exist=True))
    config.merge(config_flavor_file(name, directory, platform.system().lower()))
    config.merge(load_config_file_base(os.path.join(os.path.expanduser(user_dir), name + config_extension),
                                       must_exist=False))
    config.merge(config_flavor_file(name, directory))
    if overrides:
        config.merge(overrides)

    validated = ConfigObj(config.dict(), configspec=config_filename(config_flavor(name, 'schema'), directory))
    result = validated.validate(Validator(), preserve_errors=True)
    if result is not True:
        problems = []
        for section_list, key, res in flatten_errors(validated, result):
            section = ', '.join(section_list)
            if key is not None:
                problems.append('the "%s" key in section "%s" failed validation: %s' % (key, section, res))
            else:
                problems.append('section "%s" is missing' % section)
        raise ConfigObjError("the config failed validation: %s" % '; '.join(problems))
    return validated


def fetch_conf_path(conf: Section, path):
    """
    Retrieves the named configuration section
    :param conf:        The root configuration
    :param path:        An iterable that lists the names of the nested sections to resolve
    :return: The configuration section identified by the path, or None
    """
    for p in path:
        conf = conf.get(p, None)
        if conf is None:
            return None
    return conf


def apply_conf(conf: Section, target):
    """
    Applies the attributes contained in a configuration object to a target object.
    It does this by iterating over the items in the configuration and setting any attributes with the same name.
    """
    for k, v in conf.items():
        if hasattr(target, k):
            setattr(target, k, v)
    return target


def apply(target, config_path, conf: Section):
    """
    Applies defined values from a section path to a given target object.
    :param config_path: the dotted path of the section, e.g. 'reader'
    """
    section = fetch_conf_path(conf, config_path.split('.'))
    if section:
        apply_conf(section, target)
    return target
