#!/usr/bin/env python3

# dfu_dump.py: Prints the structure of a DFU or DfuSe file, optionally
# extracting the firmware data

import argparse
import json
import logging
import os
import sys
import urllib.request

import jinja2

import version
import dfufile
from dfufile import crc, dump

log = logging.getLogger("dfu_dump")

class TerminateException(Exception):
    "Signifies that dfu_dump.py wishes to stop the program in a controlled manner"
    pass

def add_default_arguments(parser):
    parser.add_argument('file', type=str, metavar='FILE',
                        help='Path or http(s) URL of the .dfu file')
    parser.add_argument('-v', '--verbose',
                        action="count", default=0,
                        help='Increases verbosity of output')
    parser.add_argument('--config', type=str,
                        action='append', default=[],
                        help='Add one or more configuration files')
    parser.add_argument('--crc', action='store_true',
                        help='Also prints the calculated CRC')
    parser.add_argument('--extract', type=str, metavar='DIR',
                        help='Writes the data of each element to DIR')
    parser.add_argument('--save-metadata', type=str, metavar='FILE', dest='metadata_file',
                        help='Saves the file structure as JSON to FILE')
    parser.add_argument('--template', type=str, metavar='FILE',
                        help='jinja2 template to use instead of the built-in dump format')
    parser.add_argument('--version', action='version', version='%(prog)s ' + version.VERSION)
    return parser

def default_config():
    # 0. Fall-back values
    return {'verbose': 0,
            'show_crc': False,
            'extract_dir': None,
            'metadata_file': None,
            'template': None}

def get_config(args):
    config = default_config()
    # 1. Config files, executed with the config as namespace
    for c in args.config:
        if os.path.isfile(c):
            log.info('Reading config %s', c)
            with open(c) as f:
                exec(f.read(), config)
        else:
            print("Error: Can't find config file", c)
            raise TerminateException()
    config.pop('__builtins__', None)
    # 2. Command line arguments
    if args.verbose:
        config['verbose'] = args.verbose
    if args.crc:
        config['show_crc'] = True
    if args.extract is not None:
        config['extract_dir'] = args.extract
    if args.metadata_file is not None:
        config['metadata_file'] = args.metadata_file
    if args.template is not None:
        config['template'] = args.template
    return config

def setup_logging(verbosity):
    "Each step of <verbosity> lowers the level: WARNING, INFO, DEBUG"
    levels = [logging.WARNING, logging.INFO, logging.DEBUG]
    level = levels[min(verbosity, len(levels) - 1)]
    logging.basicConfig(format='%(levelname)s %(name)s: %(message)s')
    # basicConfig() does nothing once the root logger has handlers
    logging.getLogger().setLevel(level)
    return level

def load(location) -> bytes:
    "Reads the complete content of a local file or an http(s) URL"
    if location.startswith("http:") or location.startswith("https:"):
        log.info('Downloading %s', location)
        with urllib.request.urlopen(location) as response:
            return response.read()
    with open(location, 'rb') as f:
        return f.read()

def extract(file, directory):
    "Writes the firmware data of <file> to files in <directory>. Returns the paths."
    os.makedirs(directory, exist_ok=True)
    written = []
    if file.kind == "Plain":
        parts = [('payload.bin', file.payload)]
    else:
        parts = [(dump.element_filename(target_ix, element_ix, element.address), element.data)
                 for (target_ix, target) in enumerate(file.targets)
                 for (element_ix, element) in enumerate(target.elements)]
    for (name, data) in parts:
        path = os.path.join(directory, name)
        with open(path, 'wb') as f:
            f.write(data)
        log.info('Wrote %d bytes to %s', len(data), path)
        written.append(path)
    return written

def run(config, location):
    data = load(location)
    file = dfufile.parse(data)
    template = None
    if config['template']:
        with open(config['template']) as f:
            template = f.read()
    calculated_crc = None
    if config['show_crc']:
        calculated_crc = crc.dfu_crc(crc.covered(data))
    sys.stdout.write(dump.render(file, calculated_crc=calculated_crc, template=template))
    if config['extract_dir']:
        extract(file, config['extract_dir'])
    if config['metadata_file']:
        with open(config['metadata_file'], 'w') as f:
            json.dump(dump.metadata(file), f, indent=2)
    return file

def main(argv=None):
    parser = argparse.ArgumentParser(description='Prints the structure of a DFU or DfuSe firmware file')
    add_default_arguments(parser)
    args = parser.parse_args(argv)
    # From the command line first, so that reading config files is logged
    setup_logging(args.verbose)
    try:
        config = get_config(args)
    except TerminateException:
        return 2
    setup_logging(config['verbose'])
    try:
        run(config, args.file)
    except dfufile.DfuError as e:
        print('Error: %s is not a valid DFU file: %s' % (args.file, e))
        return 1
    except jinja2.TemplateError as e:
        print('Error: invalid template %s: %s' % (config['template'], e))
        return 1
    except OSError as e:
        print('Error: %s' % e)
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
