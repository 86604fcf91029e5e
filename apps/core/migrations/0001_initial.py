from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Tenant',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Organisation name', max_length=200)),
                ('slug', models.SlugField(help_text='URL-friendly name (derived from the name)', max_length=200, unique=True)),
                ('logo_url', models.URLField(blank=True, help_text='Public URL of the tenant logo', max_length=500, null=True)),
                ('color_scheme', models.CharField(default='professional-blue', help_text='Colour preset id', max_length=50)),
                ('deals_label', models.CharField(default='Deals', max_length=50)),
                ('deals_singular_label', models.CharField(default='Deal', max_length=50)),
                ('contacts_label', models.CharField(default='Contacts', max_length=50)),
                ('contacts_singular_label', models.CharField(default='Contact', max_length=50)),
                ('companies_label', models.CharField(default='Companies', max_length=50)),
                ('companies_singular_label', models.CharField(default='Company', max_length=50)),
                ('is_active', models.BooleanField(default=True, help_text='Is tenant active?')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Tenant',
                'verbose_name_plural': 'Tenants',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['is_active'], name='tenant_active_idx')],
            },
        ),
    ]
