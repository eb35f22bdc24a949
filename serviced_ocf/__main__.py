import importlib
import sys

HELP = """Usage:

  serviced-ra <action>                  Manage the serviced daemon
  serviced-storage-ra <action>          Manage the serviced storage

  python -m serviced_ocf <agent> <action>

Agents:
  serviced
  serviced-storage

Actions:
  start stop status monitor validate-all meta-data usage help
"""

AGENTS = {
    "serviced": ("serviced_ocf.drivers.resource.app.serviced", "AppServiced"),
    "serviced-storage": ("serviced_ocf.drivers.resource.storage.serviced", "StorageServiced"),
}


def agent(name):
    from serviced_ocf.core.agent import Agent
    modname, clsname = AGENTS[name]
    mod = importlib.import_module(modname)
    return Agent(mod, getattr(mod, clsname))


def main(argv=None):
    if argv is None:
        argv = sys.argv
    try:
        name = argv[1]
    except IndexError:
        print(HELP, file=sys.stderr)
        return 2
    if name not in AGENTS:
        print(HELP, file=sys.stderr)
        return 2
    return agent(name)(argv=argv[2:])


def main_serviced(argv=None):
    if argv is None:
        argv = sys.argv
    return agent("serviced")(argv=argv[1:])


def main_storage(argv=None):
    if argv is None:
        argv = sys.argv
    return agent("serviced-storage")(argv=argv[1:])


if __name__ == "__main__":
    ret = main(sys.argv)
    sys.exit(ret)
