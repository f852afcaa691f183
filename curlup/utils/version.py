symbol = {'alpha': 'a', 'beta': 'b'}


def get_version(version):
    assert len(version) == 5
    assert version[3] in ('alpha', 'beta', 'rc', 'final')
    main = '.'.join(map(str, version[:3]))
    sub = ''
    if version[3] != 'final':
        sub = '%s%s' % (symbol.get(version[3], version[3]), version[4])
    return main + sub
