from whimsy import Provider, SqliteData, generate_compound, generate_single

data = SqliteData(db_path='.whimsy-example.db')
provider = Provider(data)

# Stateless: same triggers, same word
print(generate_single('plant', {'env': 'prod'}))
print(generate_compound(['color', 'plant', 'animal'], delimiter='.'))

# Stateful: the name sticks until the triggers change
web = provider.resource('whimsy_animal')
print(web.apply('web', {'triggers': {'release': '1'}}).name)
print(web.apply('web', {'triggers': {'release': '1'}}).name)
print(web.apply('web', {'triggers': {'release': '2'}}).name)

data.close()
